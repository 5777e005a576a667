from __future__ import annotations


class AliasTable:
    """Map alternate names onto canonical binding keys.

    Targets are not validated when an alias is stored: providers may alias a
    key before another provider registers it. Validation happens when the
    container resolves the alias.
    """

    def __init__(self) -> None:
        self._aliases: dict[str, str] = {}

    def alias(self, name: str, target_key: str) -> str | None:
        """Point ``name`` at ``target_key``.

        Returns:
            The previous target of ``name``, or ``None`` if it was not aliased.

        """
        previous = self._aliases.get(name)
        self._aliases[name] = target_key
        return previous

    def resolve_alias(self, name: str) -> str:
        """Return the target of ``name``, or ``name`` itself when it is not an alias."""
        return self._aliases.get(name, name)

    def is_alias(self, name: str) -> bool:
        return name in self._aliases

    def items(self) -> list[tuple[str, str]]:
        return list(self._aliases.items())

    def __len__(self) -> int:
        return len(self._aliases)
