"""Cloud infrastructure selection for stack targets."""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


class Arch(IntEnum):
    """Selects a cloud infrastructure to target when compiling."""

    NONE = 0  # no target specified.
    AWS = 1  # Amazon Web Services.
    GCP = 2  # Google Cloud Platform.
    AZURE = 3  # Microsoft Azure.
    VMWARE = 4  # VMWare vSphere, etc.


_NO_ARCH = ""
_AWS_ARCH = "aws"
_GCP_ARCH = "gcp"
_AZURE_ARCH = "azure"
_VMWARE_ARCH = "vmware"

# Human-friendly names to the Archs for those names.
ARCH_MAP: Mapping[str, Arch] = MappingProxyType(
    {
        _NO_ARCH: Arch.NONE,
        _AWS_ARCH: Arch.AWS,
        _GCP_ARCH: Arch.GCP,
        _AZURE_ARCH: Arch.AZURE,
        _VMWARE_ARCH: Arch.VMWARE,
    }
)

# Archs to human-friendly names.
ARCH_NAMES: Mapping[Arch, str] = MappingProxyType(
    {arch: name for name, arch in ARCH_MAP.items()}
)


def arch_for_name(name: str) -> Arch | None:
    return ARCH_MAP.get(name)


def name_for_arch(arch: Arch) -> str:
    return ARCH_NAMES[arch]
