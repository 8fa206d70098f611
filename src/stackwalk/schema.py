from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel

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


class TargetDTO(BaseModel):
    name: str = ""
    description: str = ""
    default: bool = False
    cloud: str = ""
    scheduler: str = ""
    options: Dict[str, Any] = {}


class MetadataDTO(BaseModel):
    kind: str = ""
    name: str = ""
    version: str = ""
    description: str = ""
    author: str = ""
    website: str = ""
    license: str = ""
    targets: Dict[str, TargetDTO] = {}


class ParameterDTO(BaseModel):
    name: str = ""
    type: str = ""
    description: str = ""
    default: Optional[Any] = None
    optional: bool = False


class DependencyDTO(BaseModel):
    name: str = ""
    version: str = ""
    source: str = ""


class ServiceDTO(BaseModel):
    """Visibility is not a field; it comes from the public/private table holding the entry."""

    name: str = ""
    type: str = ""
    properties: Dict[str, Any] = {}


class ServicesDTO(BaseModel):
    public: Dict[str, ServiceDTO] = {}
    private: Dict[str, ServiceDTO] = {}


class StackDTO(BaseModel):
    metadata: MetadataDTO = MetadataDTO()
    base: str = ""
    parameters: Dict[str, ParameterDTO] = {}
    dependencies: Dict[str, DependencyDTO] = {}
    services: ServicesDTO = ServicesDTO()


def _service(dto: ServiceDTO, *, public: bool) -> Service:
    return Service(
        name=dto.name,
        type=dto.type,
        public=public,
        properties=dict(dto.properties),
    )


def stack_from_dto(dto: StackDTO) -> Stack:
    """Build stack records from an already-structured payload.

    Mapping entries keep payload order; the walker imposes its own order.
    """
    metadata = Metadata(
        kind=dto.metadata.kind,
        name=dto.metadata.name,
        version=dto.metadata.version,
        description=dto.metadata.description,
        author=dto.metadata.author,
        website=dto.metadata.website,
        license=dto.metadata.license,
        targets={
            name: Target(**target.model_dump())
            for name, target in dto.metadata.targets.items()
        },
    )
    return Stack(
        metadata=metadata,
        base=dto.base,
        parameters={
            name: Parameter(**param.model_dump())
            for name, param in dto.parameters.items()
        },
        dependencies={
            Name(name): Dependency(**dep.model_dump())
            for name, dep in dto.dependencies.items()
        },
        services=Services(
            public={
                Name(name): _service(svc, public=True)
                for name, svc in dto.services.public.items()
            },
            private={
                Name(name): _service(svc, public=False)
                for name, svc in dto.services.private.items()
            },
        ),
    )

