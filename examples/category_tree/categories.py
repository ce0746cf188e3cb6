# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Category tree - Example of a custom node type in a NestedSet.

A didactic example showing how a domain object becomes a NestedSet node
by composition: Category keeps its own fields and delegates the nested
set bounds to an embedded Node.
"""

from __future__ import annotations

from genro_nestedset import NestedSet, Node


class Category:
    """A product category stored in a NestedSet.

    Example:
        >>> catalog = Catalog()
        >>> food = catalog.add('FOOD', 'Food')
        >>> fruit = catalog.add('FRUIT', 'Fruit', parent=food)
        >>> catalog.path(fruit)
        'Catalog / Food / Fruit'
    """

    def __init__(self, code: str = '', title: str = ''):
        self.code = code
        self.title = title
        self._node = Node(title)

    @property
    def id(self) -> int:
        """Identifier assigned by the NestedSet."""
        return self._node.id

    @id.setter
    def id(self, value: int) -> None:
        self._node.id = value

    @property
    def level(self) -> int:
        """Depth in the catalog tree."""
        return self._node.level

    @level.setter
    def level(self, value: int) -> None:
        self._node.level = value

    @property
    def left(self) -> int:
        """Left nested set bound."""
        return self._node.left

    @left.setter
    def left(self, value: int) -> None:
        self._node.left = value

    @property
    def right(self) -> int:
        """Right nested set bound."""
        return self._node.right

    @right.setter
    def right(self, value: int) -> None:
        self._node.right = value

    @property
    def name(self) -> str:
        """Display name, exported with the records; same as title."""
        return self.title

    @name.setter
    def name(self, value: str) -> None:
        self.title = value

    def __repr__(self) -> str:
        return f"Category({self.code!r}, {self.title!r})"


class Catalog:
    """A catalog of categories backed by a NestedSet."""

    def __init__(self, title: str = 'Catalog'):
        self._store = NestedSet(root_name=title, node_factory=Category)

    @property
    def store(self) -> NestedSet:
        """Access the underlying NestedSet."""
        return self._store

    def add(self, code: str, title: str, parent: Category | None = None) -> Category:
        return self._store.add(Category(code, title), parent)

    def path(self, category: Category) -> str:
        """Return the titles from the root down to category."""
        return ' / '.join(c.title for c in self._store.ancestors(category, include_self=True))

    def dump(self) -> str:
        lines = []
        for c in self._store.branch():
            lines.append(f"{'..' * c.level}{c.title} [{c.left},{c.right}]")
        return '\n'.join(lines)


if __name__ == '__main__':
    catalog = Catalog()
    food = catalog.add('FOOD', 'Food')
    fruit = catalog.add('FRUIT', 'Fruit', parent=food)
    catalog.add('APPLE', 'Apples', parent=fruit)
    drinks = catalog.add('DRINK', 'Drinks')
    juice = catalog.add('JUICE', 'Juices', parent=fruit)

    print(catalog.dump())
    print()

    catalog.store.move(juice, drinks)
    print(catalog.dump())
    print()
    print(catalog.path(juice))
    print(catalog.store.to_json())
