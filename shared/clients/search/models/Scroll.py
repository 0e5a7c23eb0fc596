from pydantic import BaseModel

from shared.clients.search.models.Hit import Hit


class ScrollPage(BaseModel):
    """Structured output of a single scan or scroll response.

    Attributes:
        hits:       Hits of this page, in backend order.
        scroll_id:  Cursor to pass to the next scroll request, or None when the
                    backend signals that no further pages exist.
        total:      Total number of matching hits, when the backend reports it.
        took:       Time in milliseconds the backend spent on the request.
    """

    hits: list[Hit] = []
    scroll_id: str | None = None
    total: int | None = None
    took: int = 0

    def is_empty(self) -> bool:
        return not self.hits
