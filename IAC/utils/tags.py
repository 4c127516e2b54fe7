"""
Tag factory for AWS resources.

Every resource carries the project tag; teardown tooling uses the same
tag to find leftovers the engine could not remove.
"""

from IAC.configs.constants import DEFAULT_TAGS

PROJECT_TAG_KEY = "project"


def create_tags(
    environment: str,
    resource_name: str,
    **extra_tags: str,
) -> dict[str, str]:
    """
    Create a standard tag set for an AWS resource.

    Args:
        environment: Deployment environment
        resource_name: Name of the resource
        **extra_tags: Additional tags to include

    Returns:
        Dictionary of tags
    """
    return merge_tags(
        DEFAULT_TAGS,
        {"Environment": environment, "Name": resource_name},
        extra_tags,
    )


def merge_tags(
    base_tags: dict[str, str],
    *additional_tags: dict[str, str],
) -> dict[str, str]:
    """Merge tag dictionaries left to right; later keys win."""
    result = dict(base_tags)
    for tags in additional_tags:
        result.update(tags)
    return result


def project_tag_filter() -> dict[str, object]:
    """EC2 describe-* filter matching resources tagged with this project."""
    return {
        "Name": f"tag:{PROJECT_TAG_KEY}",
        "Values": [DEFAULT_TAGS[PROJECT_TAG_KEY]],
    }
