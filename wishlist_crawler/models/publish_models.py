"""Models for the webhook publish outcome."""

from pydantic import BaseModel


class PublishResponse(BaseModel):
    """What the destination answered to the crawl result."""

    status_code: int
    reason_phrase: str
    text: str

    def describe(self) -> str:
        return f"{self.status_code} ({self.reason_phrase}) : {self.text}"
