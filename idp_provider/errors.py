from typing import Any, Dict, List, Optional


class OktaAPIError(Exception):
    """
    Raised by the client for any non-2xx response from the Okta API.

    Okta error bodies look like:
        {"errorCode": "E0000007", "errorSummary": "Not found: ...",
         "errorCauses": [{"errorSummary": "..."}]}
    """

    def __init__(
        self,
        status_code: int,
        error_code: Optional[str] = None,
        error_summary: Optional[str] = None,
        error_causes: Optional[List[Dict[str, Any]]] = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.error_summary = error_summary or "unknown error"
        self.error_causes = error_causes or []
        super(OktaAPIError, self).__init__(self._format())

    @classmethod
    def from_response(cls, response) -> "OktaAPIError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return cls(
            status_code=response.status_code,
            error_code=body.get("errorCode"),
            error_summary=body.get("errorSummary") or response.reason_phrase,
            error_causes=body.get("errorCauses"),
        )

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def _format(self) -> str:
        message = f"the API returned an error: {self.error_summary}"
        if self.error_code:
            message = f"{message} ({self.error_code})"
        causes = [c.get("errorSummary") for c in self.error_causes if c.get("errorSummary")]
        if causes:
            message = f"{message}. Causes: {'; '.join(causes)}"
        return f"{message}, HTTP status code: {self.status_code}"


class ResourceValidationError(ValueError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super(ResourceValidationError, self).__init__("; ".join(self.errors))
