"""CorrelationStorePort interface (Hexagonal Architecture)"""

from abc import ABC, abstractmethod
from typing import Optional

from .models import CorrelationRecord, DeliveryUpdate


class CorrelationStorePort(ABC):
    """Port interface for the store holding correlation (ping) records.

    The GUID filter only needs three operations. Adapters translate their
    own driver errors into CorrelationLookupError/CorrelationUpdateError.
    """

    @abstractmethod
    def validate_access(self) -> None:
        """Check the configured table can be read.

        Raises:
            CorrelationLookupError: If the table is missing or not readable
        """
        pass

    @abstractmethod
    def find_unseen(self, token: str) -> Optional[CorrelationRecord]:
        """Look up the record for a token that has not been seen yet.

        Args:
            token: Correlation token extracted from the subject

        Returns:
            The matching record with its lookup field value, or None if no
            unseen record exists for the token

        Raises:
            CorrelationLookupError: On any store failure
        """
        pass

    @abstractmethod
    def record_delivery(self, delivery: DeliveryUpdate) -> int:
        """Write timing and message data to the record and mark it seen.

        Returns:
            Number of rows updated

        Raises:
            CorrelationUpdateError: If the update cannot be prepared or executed
        """
        pass
