from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from fiscal_periods.client import FinanceClient


class Resource:
    def __init__(self, client: "FinanceClient") -> None:
        self._c = client

    # convenience pass-throughs
    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._c.get(path, params=params)

    def _patch(
        self, path: str, *, params: Optional[Dict[str, Any]] = None, json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return self._c.patch(path, params=params, json=json)

    def _document(self, collection: str, doc_id: str) -> str:
        return self._c.document_path(collection, doc_id)
