"""Intrusive circular doubly linked lists and singly linked lists."""

from typing import Any, Iterator, Optional


class ListNode:
    """A node of a circular doubly linked list; a node also serves as a list head.

    An unlinked node points at itself, which is also what an empty head looks like.
    `owner` lets a node find the object it is embedded in.
    """

    def __init__(self, owner: Any = None) -> None:
        self.owner = owner
        self.next: "ListNode" = self
        self.prev: "ListNode" = self

    def insert_after(self, node: "ListNode") -> None:
        """Link `node` directly after this one."""
        self.next.prev = node
        node.next = self.next
        self.next = node
        node.prev = self

    def insert_before(self, node: "ListNode") -> None:
        """Link `node` directly before this one (at the tail when this is a head)."""
        self.prev.next = node
        node.prev = self.prev
        self.prev = node
        node.next = self

    def remove(self) -> None:
        """Unlink this node from whatever list holds it."""
        self.next.prev = self.prev
        self.prev.next = self.next
        self.next = self
        self.prev = self

    def is_empty(self) -> bool:
        """True when no other node is linked to this one."""
        return self.next is self

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __iter__(self) -> Iterator["ListNode"]:
        """Yield the nodes after this head; removing the yielded node is safe."""
        node = self.next
        while node is not self:
            following = node.next
            yield node
            node = following


class SListNode:
    """A node of a singly linked list; a node also serves as a list head."""

    def __init__(self, owner: Any = None) -> None:
        self.owner = owner
        self.next: Optional["SListNode"] = None

    def append(self, node: "SListNode") -> None:
        """Link `node` at the tail of the list."""
        self.tail().next = node
        node.next = None

    def insert(self, node: "SListNode") -> None:
        """Link `node` directly after the head."""
        node.next = self.next
        self.next = node

    def remove(self, node: "SListNode") -> "SListNode":
        """Unlink `node` if it is in the list and return the head."""
        current = self
        while current.next is not None and current.next is not node:
            current = current.next
        if current.next is not None:
            current.next = current.next.next
        return self

    def first(self) -> Optional["SListNode"]:
        """The first node after the head, or None."""
        return self.next

    def tail(self) -> "SListNode":
        """The last node, or the head itself when the list is empty."""
        node = self
        while node.next is not None:
            node = node.next
        return node

    def is_empty(self) -> bool:
        """True when nothing follows the head."""
        return self.next is None

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __iter__(self) -> Iterator["SListNode"]:
        node = self.next
        while node is not None:
            yield node
            node = node.next