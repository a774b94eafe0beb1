"""
Specs Routes - read-only access to the placement registry.
"""
from fastapi import APIRouter, HTTPException

from creative_validator.models import Network
from creative_validator.services.registry import (
    REGISTRY_VERSION, FORMAT_NETWORKS, get_network_specs, list_networks
)

router = APIRouter(prefix="/specs", tags=["Specs"])


@router.get("")
async def list_specs():
    """
    Get every network's placement specifications.
    """
    return {
        "version": REGISTRY_VERSION,
        "networks": {
            network.value: {
                key: spec.model_dump() for key, spec in get_network_specs(network).items()
            }
            for network in list_networks()
        }
    }


@router.get("/formats/allowlist")
async def format_allowlist():
    """
    Get the detected-format to network allowlist.
    """
    return {
        "allowlist": {
            tag.value: [n.value for n in networks]
            for tag, networks in FORMAT_NETWORKS.items()
        }
    }


@router.get("/{network}")
async def network_specs(network: str):
    """
    Get the placement specifications of one network.
    """
    try:
        specs = get_network_specs(network.upper())
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "network": Network(network.upper()).value,
        "placements": {key: spec.model_dump() for key, spec in specs.items()}
    }
