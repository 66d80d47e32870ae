# invoicedesk/services/revalidation.py

import logging
import threading
from typing import Dict

logger = logging.getLogger(__name__)

INVOICES_VIEW = "/dashboard/invoices"


class ViewCache:
    """
    Version counter per view path. Mutations bump the version of the views
    they touch. Reads never consult it; every list and detail read goes to
    the store.
    """

    def __init__(self):
        self._versions: Dict[str, int] = {}
        self._lock = threading.Lock()

    def version(self, path: str) -> int:
        with self._lock:
            return self._versions.get(path, 0)

    def revalidate_path(self, path: str) -> None:
        with self._lock:
            self._versions[path] = self._versions.get(path, 0) + 1
            version = self._versions[path]
        logger.info("Revalidated %s (version %s)", path, version)


view_cache = ViewCache()
