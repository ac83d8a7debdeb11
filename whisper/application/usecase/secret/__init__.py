"""Secret use cases."""

from .list_secrets import ListSecretsUseCase
from .submit_secret import SubmitSecretUseCase

__all__ = ["ListSecretsUseCase", "SubmitSecretUseCase"]
