import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from idp_provider.core.client.base import IdentityProviderClient
from idp_provider.resources.schema import FieldSchema, FieldType, validate_config

logger = logging.getLogger(__name__)

class ResourceData:
    """
    One resource instance as seen by a lifecycle callback.

    `get` resolves a key from the values set during the current call first.
    With a declaration (create, update) non-computed fields then come from the
    declaration alone, so an attribute dropped from it reverts to its default;
    computed fields fall back to the prior state. Without one (read, delete,
    import) everything falls back to the prior state. The field default and
    then the type's zero value come last. Set fields come back as a
    de-duplicated list.
    """

    def __init__(
        self,
        schema: Mapping[str, FieldSchema],
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[Mapping[str, Any]] = None,
        id: str = "",
    ):
        self.schema = schema
        self.declared = config is not None
        self._config = {k: v for k, v in (config or {}).items() if v is not None}
        self._state = {k: v for k, v in (state or {}).items() if k != "id" and v is not None}
        self._changes: Dict[str, Any] = {}
        self._id = id or (state or {}).get("id") or ""

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value or ""

    def get(self, key: str) -> Any:
        field = self.schema[key]

        sources = [self._changes, self._config]
        if field.computed or not self.declared:
            sources.append(self._state)

        for source in sources:
            if key in source:
                value = source[key]
                break
        else:
            value = field.default if field.default is not None else field.zero_value()

        if field.type == FieldType.SET:
            return list(dict.fromkeys(value))
        return value

    def set(self, key: str, value: Any) -> None:
        """Record a value read back from the service; None stores the zero value."""
        if key not in self.schema:
            raise KeyError(f"{key} is not part of the resource schema")
        if value is None:
            value = self.schema[key].zero_value()
        self._changes[key] = value

    def state(self) -> Dict[str, Any]:
        """Flat state after the call; empty when the resource is absent."""
        if not self._id:
            return {}
        attrs = {key: self.get(key) for key in self.schema}
        return {"id": self._id, **attrs}


Callback = Callable[[ResourceData, IdentityProviderClient], None]
ExistsCallback = Callable[[ResourceData, IdentityProviderClient], bool]
Importer = Callable[[ResourceData, IdentityProviderClient], List[ResourceData]]


def import_state_passthrough(d: ResourceData, client: IdentityProviderClient) -> List[ResourceData]:
    """The import id is the remote id; the following read fills everything else."""
    logger.debug(f"Importing {d.id}")
    return [d]


class Resource:
    def __init__(
        self,
        schema: Dict[str, FieldSchema],
        create: Callback,
        read: Callback,
        update: Callback,
        delete: Callback,
        exists: Optional[ExistsCallback] = None,
        importer: Importer = import_state_passthrough,
    ):
        self.schema = schema
        self.create = create
        self.read = read
        self.update = update
        self.delete = delete
        self.exists = exists
        self.importer = importer

    def data(
        self,
        config: Optional[Mapping[str, Any]] = None,
        state: Optional[Mapping[str, Any]] = None,
        id: str = "",
    ) -> ResourceData:
        """Build a ResourceData, validating `config` when one is given."""
        if config is not None:
            validate_config(self.schema, config)
        return ResourceData(self.schema, config=config, state=state, id=id)

    def import_state(self, idp_id: str, client: IdentityProviderClient) -> List[Dict[str, Any]]:
        results = []
        for d in self.importer(self.data(id=idp_id), client):
            self.read(d, client)
            if d.id:
                results.append(d.state())
        return results
