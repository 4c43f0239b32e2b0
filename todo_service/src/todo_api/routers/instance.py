from __future__ import annotations

from fastapi import APIRouter, Depends

from ..metadata import InstanceMetadataClient, get_metadata_client
from ..schemas import InstanceMetadata

router = APIRouter(
    prefix="/api",
    tags=["instance"],
)


# PUBLIC_INTERFACE
@router.get(
    "/metadata",
    response_model=InstanceMetadata,
    summary="Instance Metadata",
    description=(
        "Identity facts of the instance serving the request, read through IMDSv2. "
        "Fields that cannot be fetched are returned as 'N/A'."
    ),
)
def instance_metadata(
    client: InstanceMetadataClient = Depends(get_metadata_client),
) -> InstanceMetadata:
    return client.describe_instance()
