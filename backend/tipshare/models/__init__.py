"""
TipShare Backend: Persisted Record Models
===========================================

What:  Pydantic models describing the records stored in the JSON document.
How:   Field names on disk are camelCase (profilePicture, userId) to stay
       compatible with the browser client; Python code uses snake_case.
"""

from tipshare.models.document import StoreDocument
from tipshare.models.tip import Tip
from tipshare.models.user import User

__all__ = ["StoreDocument", "Tip", "User"]
