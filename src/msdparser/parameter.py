#!/usr/bin/env python3

import typing
from dataclasses import dataclass, field
from dataclasses_json import dataclass_json


@dataclass_json
@dataclass
class MSDParameter(object):
    """
    An MSD parameter, made of a key and some values (usually one).

    The first component is the part immediately after the `#` sign,
    every following component was separated from the previous one by a `:`.
    """
    components: typing.List[str] = field(default_factory=list)

    def key(self) -> typing.Optional[str]:
        """
        The first component, or None if there are no components at all
        (the parser never produces such a parameter).
        """
        return self.components[0] if len(self.components) > 0 else None

    def value(self, index: int = 0) -> typing.Optional[str]:
        """
        The value at `index`, counting from the component right after the key.

        Returns None when there is no such value, e.g. `#KEY;` has no value at all.
        This rarely happens in practice and is typically treated the same as a blank value.
        """
        if index < 0 or index + 1 >= len(self.components):
            return None
        return self.components[index + 1]

    def values(self) -> typing.List[str]:
        return list(self.components[1:])

    def __str__(self) -> str:
        key = self.key()
        if key is None:
            return "<empty parameter>"
        values = self.values()
        if len(values) == 0:
            return key
        return f"{key}: {' | '.join(values)}"
