from typing import Generic, TypeVar

from golive.shared.api.utils import ApiSuccess

T = TypeVar("T")


class ApiOut(ApiSuccess, Generic[T]):
    """Success envelope returned by every v1 router."""

    results: T  # type: ignore[valid-type]
