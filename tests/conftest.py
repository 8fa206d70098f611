from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


import pytest

from stackwalk.diag import Document
from stackwalk.model import (
    Dependency,
    Metadata,
    Name,
    Parameter,
    Service,
    Services,
    Stack,
    Target,
)


@pytest.fixture(autouse=True)
def _clear_order_env(monkeypatch):
    monkeypatch.delenv("STACKWALK_ORDER_POLICY", raising=False)
    monkeypatch.delenv("STACKWALK_ORDER_TELEMETRY", raising=False)


@pytest.fixture
def doc() -> Document:
    return Document(file="stacks/web/Mu.yaml", body=b"name: web\n")


@pytest.fixture
def make_stack():
    def _make(
        *,
        parameters: tuple[str, ...] = ("b", "a", "c"),
        dependencies: tuple[str, ...] = ("mu/redis", "mu/aws"),
        public: tuple[str, ...] = ("z",),
        private: tuple[str, ...] = ("a",),
        targets: tuple[str, ...] = ("prod", "dev"),
    ) -> Stack:
        return Stack(
            metadata=Metadata(
                kind="Stack",
                name="web",
                version="1.0.0",
                targets={name: Target(cloud="aws") for name in targets},
            ),
            parameters={name: Parameter(type="string") for name in parameters},
            dependencies={Name(name): Dependency(version="^1.0") for name in dependencies},
            services=Services(
                public={Name(name): Service(type="mu/container") for name in public},
                private={Name(name): Service(type="mu/container") for name in private},
            ),
        )

    return _make
