"""Pytest fixtures for eventguard tests."""

import tempfile
from pathlib import Path

import pytest

from eventguard.host import Engine
from eventguard.syntax.tree import EVENT_DECLARATION_TYPES, SyntaxTree

FIELD_EVENT_SOURCE = """namespace VirtualEventTestCode
{
    public class Driver
    {
        public virtual event EventHandler<EventArgs> OnVirtualEvent;
    }
}"""

FIELD_EVENT_FIXED = """namespace VirtualEventTestCode
{
    public class Driver
    {
        public event EventHandler<EventArgs> OnVirtualEvent;
    }
}"""

FIELD_EVENT_WITH_RAISE = """namespace VirtualEventTestCode
{
    public class Driver
    {
        public event EventHandler<EventArgs> OnVirtualEvent;

        protected virtual EventArgs RaiseVirtualEvent(EventArgs args)
        {
            OnVirtualEvent?.Invoke(this, args);
            return args;
        }
    }
}"""

PROPERTY_EVENT_SOURCE = """namespace VirtualEventTestCode
{
    public class Driver
    {
        protected event EventHandler<EventArgs> eventField;

        public virtual event EventHandler<EventArgs> OnVirtualEvent
        {
            add { eventField += value; }
            remove { eventField -= value; }
        }
    }
}"""

PROPERTY_EVENT_FIXED = """namespace VirtualEventTestCode
{
    public class Driver
    {
        protected event EventHandler<EventArgs> eventField;

        public event EventHandler<EventArgs> OnVirtualEvent
        {
            add { eventField += value; }
            remove { eventField -= value; }
        }
    }
}"""

PROPERTY_EVENT_WITH_RAISE = """namespace VirtualEventTestCode
{
    public class Driver
    {
        protected event EventHandler<EventArgs> eventField;

        public event EventHandler<EventArgs> OnVirtualEvent
        {
            add { eventField += value; }
            remove { eventField -= value; }
        }

        protected virtual EventArgs RaiseVirtualEvent(EventArgs args)
        {
            eventField?.Invoke(this, args);
            return args;
        }
    }
}"""


def parse(source: str) -> SyntaxTree:
    """Parse C# source into a tree."""
    return SyntaxTree.parse(source, path="Test0.cs")


def event_nodes(tree: SyntaxTree) -> list:
    """All event declaration nodes, in document order."""
    return [node for node in tree.walk() if node.type in EVENT_DECLARATION_TYPES]


def wrap_in_class(members: str) -> str:
    """Place member declarations inside a class body."""
    body = "\n".join(f"    {line}" if line else "" for line in members.splitlines())
    return f"public class Widget\n{{\n{body}\n}}\n"


@pytest.fixture
def engine():
    """Create an Engine with default configuration."""
    return Engine()


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
