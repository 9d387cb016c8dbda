"""Route frozen dataclass."""

from dataclasses import dataclass

from nestbox._internal.types import Handler


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``handler`` is what the fixture application calls. A method
    restriction is already baked into it by ``allowed``.
    """

    path: str
    handler: Handler
