"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from app.services.domain.branch_generator import BranchGenerationConfig, BranchPipeGenerator
from app.services.application.layout_service import LayoutService


def get_branch_generator() -> BranchPipeGenerator:
    """
    Dependency factory for BranchPipeGenerator.

    Returns:
        BranchPipeGenerator configured from settings
    """
    return BranchPipeGenerator(config=BranchGenerationConfig.from_settings())


def get_layout_service(
    generator: Annotated[BranchPipeGenerator, Depends(get_branch_generator)],
) -> LayoutService:
    """
    Dependency factory for LayoutService.

    Args:
        generator: Branch pipe generator (injected)

    Returns:
        LayoutService instance
    """
    return LayoutService(generator=generator)


# Type aliases for cleaner route signatures
LayoutServiceDep = Annotated[LayoutService, Depends(get_layout_service)]
