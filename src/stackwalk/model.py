"""Record types for a deployable stack document.

These are plain carriers populated by a document loader. The traversal engine
in :mod:`stackwalk.core.visitor` reads them, hands them to observers for
in-place edits, and writes them back into their owning mappings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, NewType

Name = NewType("Name", str)


@dataclass
class Target:
    name: str = ""
    description: str = ""
    default: bool = False
    cloud: str = ""
    scheduler: str = ""
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Metadata:
    kind: str = ""
    name: str = ""
    version: str = ""
    description: str = ""
    author: str = ""
    website: str = ""
    license: str = ""
    targets: Dict[str, Target] = field(default_factory=dict)


@dataclass
class Parameter:
    name: str = ""
    type: str = ""
    description: str = ""
    default: Any = None
    optional: bool = False


@dataclass
class Dependency:
    name: str = ""
    version: str = ""
    source: str = ""


@dataclass
class Service:
    name: str = ""
    type: str = ""
    public: bool = False
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Services:
    public: Dict[Name, Service] = field(default_factory=dict)
    private: Dict[Name, Service] = field(default_factory=dict)


@dataclass
class Stack:
    metadata: Metadata = field(default_factory=Metadata)
    base: str = ""
    parameters: Dict[str, Parameter] = field(default_factory=dict)
    dependencies: Dict[Name, Dependency] = field(default_factory=dict)
    services: Services = field(default_factory=Services)
