# app/core/exceptions.py
from typing import Optional


class AnalysisError(Exception):
    """Base error carrying the HTTP status and the user-facing message."""
    status_code = 500
    default_message = "Une erreur inattendue est survenue."

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class BadRequestError(AnalysisError):
    status_code = 400
    default_message = "URL manquante"


class MethodNotAllowedError(AnalysisError):
    status_code = 405
    default_message = "Méthode non autorisée"


class FetchError(AnalysisError):
    """The analyzed page could not be retrieved."""

    @classmethod
    def unreachable(cls, url: str) -> "FetchError":
        return cls(
            f"Impossible d'accéder au site {url}. "
            "Il est peut-être inaccessible ou bloque les requêtes automatiques."
        )

    @classmethod
    def too_many_redirects(cls, url: str) -> "FetchError":
        return cls(
            f"Le site {url} effectue trop de redirections "
            "ou bloque les requêtes automatiques."
        )


class EmptyPageError(AnalysisError):

    @classmethod
    def for_url(cls, url: str) -> "EmptyPageError":
        return cls(f"Le site {url} a renvoyé une page vide ou invalide.")


class InternalError(AnalysisError):
    pass
