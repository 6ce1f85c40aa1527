from memoryshare.models.space import Space
from memoryshare.models.media import Media
from memoryshare.models.user import User
from memoryshare.models.payment import Payment

__all__ = [
    "Space",
    "Media",
    "User",
    "Payment",
]
