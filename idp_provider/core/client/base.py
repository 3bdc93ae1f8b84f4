from abc import ABC, abstractmethod
from typing import Type, TypeVar

from idp_provider.schemas.idp import IdentityProvider

IdpT = TypeVar("IdpT", bound=IdentityProvider)

class IdentityProviderClient(ABC):
    """
    Abstract interface for the identity service's IdP endpoints.
    Decouples the resource handlers from the HTTP implementation so tests can
    swap in an in-memory client.

    Every method raises OktaAPIError for a non-2xx response.
    """

    @abstractmethod
    def create_identity_provider(self, idp: IdpT) -> IdpT:
        """
        Create a new IdP.

        Args:
            idp: Request payload; its id is ignored.

        Returns:
            The created IdP as returned by the service, same variant as `idp`,
            with the service-assigned id and status.
        """
        pass

    @abstractmethod
    def get_identity_provider(self, idp_id: str, model: Type[IdpT]) -> IdpT:
        """
        Fetch an IdP by id and parse it into `model`.
        """
        pass

    @abstractmethod
    def update_identity_provider(self, idp_id: str, idp: IdpT) -> IdpT:
        """
        Replace the IdP identified by `idp_id` with `idp`.
        """
        pass

    @abstractmethod
    def delete_identity_provider(self, idp_id: str) -> None:
        pass

    @abstractmethod
    def activate_identity_provider(self, idp_id: str) -> None:
        pass

    @abstractmethod
    def deactivate_identity_provider(self, idp_id: str) -> None:
        pass

    def close(self) -> None:
        """
        Release any connections held by the client. No-op by default.
        """
        pass
