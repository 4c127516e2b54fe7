"""
ECR Repository Component for the API Container Image.

Integration Flow:
  1. CI (GitHub Actions role) builds the API image and pushes <ECR_URL>:latest.
  2. The ECS task definition references <ECR_URL>:latest (compute/ecs_service.py).
  3. `aws ecs update-service --force-new-deployment` rolls the service onto the new image.

Key Features:
- scan_on_push=True: every pushed image is scanned for CVEs.
- Lifecycle policy: keep the last 10 images, expire the rest.
- force_delete=True: the repository is emptied and removed on `pulumi destroy`.
- Tag mutability: MUTABLE (the 'latest' tag is overwritten on each push).
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import ECR_KEEP_IMAGES
from IAC.utils.tags import create_tags


@dataclass
class EcrRepositoryOutputs:
    """Output values from ECR repository component."""
    repository_url: pulumi.Output[str]
    repository_arn: pulumi.Output[str]
    repository_name: pulumi.Output[str]


class EcrRepositoryComponent(pulumi.ComponentResource):
    """
    ECR repository for the refactoring API container image.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        repository_name: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:storage:EcrRepository", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.repository = aws.ecr.Repository(
            f"{name}-repo",
            name=repository_name,
            force_delete=True,
            image_scanning_configuration=aws.ecr.RepositoryImageScanningConfigurationArgs(
                scan_on_push=True,
            ),
            image_tag_mutability="MUTABLE",
            encryption_configurations=[
                aws.ecr.RepositoryEncryptionConfigurationArgs(
                    encryption_type="AES256",
                ),
            ],
            tags=create_tags(environment, repository_name),
            opts=child_opts,
        )

        aws.ecr.LifecyclePolicy(
            f"{name}-repo-lifecycle",
            repository=self.repository.name,
            policy=pulumi.Output.json_dumps({
                "rules": [{
                    "rulePriority": 1,
                    "description": f"Keep last {ECR_KEEP_IMAGES} images",
                    "selection": {
                        "tagStatus": "any",
                        "countType": "imageCountMoreThan",
                        "countNumber": ECR_KEEP_IMAGES,
                    },
                    "action": {
                        "type": "expire",
                    },
                }],
            }),
            opts=child_opts,
        )

        self.register_outputs({
            "repository_url": self.repository.repository_url,
            "repository_arn": self.repository.arn,
            "repository_name": self.repository.name,
        })

    def get_outputs(self) -> EcrRepositoryOutputs:
        """Get ECR repository output values."""
        return EcrRepositoryOutputs(
            repository_url=self.repository.repository_url,
            repository_arn=self.repository.arn,
            repository_name=self.repository.name,
        )
