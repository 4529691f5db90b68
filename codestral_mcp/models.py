"""
Model registry and endpoint routing.

Every model identifier belongs to exactly one capability class, and each
class is served by exactly one upstream target:

    code     -> Codestral endpoint (chat + fill-in-the-middle)
    general  -> Mistral endpoint   (chat only)

The registry is checked when this module is imported, so a model listed
twice or a class without a target fails at startup rather than mid-request.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from codestral_mcp.config import CODESTRAL_API_BASE, MISTRAL_API_BASE


class CapabilityClass(str, Enum):
    CODE = "code"
    GENERAL = "general"


# Code-specialized models (Codestral endpoint)
CODESTRAL = "codestral-latest"
CODESTRAL_MAMBA = "codestral-mamba-latest"
# General-purpose models (Mistral endpoint)
MISTRAL_LARGE = "mistral-large-latest"
MISTRAL_SMALL = "mistral-small-latest"
MINISTRAL_8B = "ministral-8b-latest"
MINISTRAL_3B = "ministral-3b-latest"

DEFAULT_CODE_MODEL = CODESTRAL
DEFAULT_CHAT_MODEL = MISTRAL_LARGE

CODE_MODELS: tuple[str, ...] = (CODESTRAL, CODESTRAL_MAMBA)
GENERAL_MODELS: tuple[str, ...] = (
    MISTRAL_LARGE,
    MISTRAL_SMALL,
    MINISTRAL_8B,
    MINISTRAL_3B,
)


class UnknownModelError(ValueError):
    """Model identifier is not in the registry."""
    pass


class UpstreamTarget(BaseModel):
    """One remote API base and what it can do."""
    model_config = ConfigDict(frozen=True)

    name: str
    base_url: str
    supports_fim: bool


CODESTRAL_TARGET = UpstreamTarget(
    name="codestral", base_url=CODESTRAL_API_BASE, supports_fim=True
)
MISTRAL_TARGET = UpstreamTarget(
    name="mistral", base_url=MISTRAL_API_BASE, supports_fim=False
)

TARGETS: dict[CapabilityClass, UpstreamTarget] = {
    CapabilityClass.CODE: CODESTRAL_TARGET,
    CapabilityClass.GENERAL: MISTRAL_TARGET,
}


def _build_registry(
    classes: dict[CapabilityClass, tuple[str, ...]],
    targets: dict[CapabilityClass, UpstreamTarget],
) -> dict[str, CapabilityClass]:
    """
    Index model_id -> capability class.

    Raises:
        ValueError: If a model is declared in more than one class, or a
            class has models but no upstream target
    """
    registry: dict[str, CapabilityClass] = {}
    for capability, model_ids in classes.items():
        if model_ids and capability not in targets:
            raise ValueError(f"No upstream target for capability '{capability.value}'")
        for model_id in model_ids:
            if model_id in registry:
                raise ValueError(
                    f"Model '{model_id}' declared in both "
                    f"'{registry[model_id].value}' and '{capability.value}'"
                )
            registry[model_id] = capability
    return registry


_REGISTRY: dict[str, CapabilityClass] = _build_registry(
    {CapabilityClass.CODE: CODE_MODELS, CapabilityClass.GENERAL: GENERAL_MODELS},
    TARGETS,
)


def capability_of(model_id: str) -> CapabilityClass:
    """Return the capability class a model belongs to."""
    try:
        return _REGISTRY[model_id]
    except KeyError:
        raise UnknownModelError(
            f"Unknown model '{model_id}'. Available: {sorted(_REGISTRY)}"
        ) from None


def resolve(model_id: str) -> UpstreamTarget:
    """Map a model identifier to the upstream target that serves it."""
    return TARGETS[capability_of(model_id)]


def models_for(capability: CapabilityClass) -> list[str]:
    return [m for m, c in _REGISTRY.items() if c == capability]


def all_models() -> list[str]:
    return list(_REGISTRY)


def catalog() -> dict:
    """
    JSON-safe listing of the registry, grouped by upstream target.

    Returns:
        {
            "models": [...],                     # every known model, sorted
            "targets": {
                "codestral": {
                    "capability": "code",
                    "base_url": "https://...",
                    "supports_fim": True,
                    "models": [...],
                },
                ...
            },
            "defaults": {"code": "...", "chat": "..."},
        }
    """
    targets = {}
    for capability, target in TARGETS.items():
        targets[target.name] = {
            "capability": capability.value,
            "base_url": target.base_url,
            "supports_fim": target.supports_fim,
            "models": models_for(capability),
        }
    return {
        "models": sorted(_REGISTRY),
        "targets": targets,
        "defaults": {"code": DEFAULT_CODE_MODEL, "chat": DEFAULT_CHAT_MODEL},
    }
