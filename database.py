"""
Database Operations
Load and save the calculator's last-used inputs
"""

import json
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from calculator_types import CalculatorInputs
from models import CalculatorState

logger = logging.getLogger(__name__)


class CalculatorStateDB:
    """Key-value store for calculator inputs"""

    def __init__(self, session: Session):
        self.session = session

    def get_state(self, storage_key: str) -> Optional[CalculatorState]:
        """Get the stored row for a key"""
        return (
            self.session.query(CalculatorState)
            .filter(CalculatorState.storage_key == storage_key)
            .first()
        )

    def load_inputs(
        self,
        storage_key: str,
        default: Optional[CalculatorInputs] = None
    ) -> CalculatorInputs:
        """
        Load the last-used inputs

        Args:
            storage_key: Key the inputs were saved under
            default: Returned when nothing usable is stored

        Returns:
            Stored inputs merged over the default
        """
        default = default or CalculatorInputs()
        state = self.get_state(storage_key)
        if state is None:
            return default

        try:
            data = json.loads(state.payload)
        except ValueError:
            logger.warning("Ignoring unreadable calculator state for key %r", storage_key)
            return default

        if not isinstance(data, dict):
            logger.warning("Ignoring calculator state for key %r: not an object", storage_key)
            return default

        return CalculatorInputs.from_dict(data, base=default)

    def save_inputs(self, storage_key: str, inputs: CalculatorInputs) -> CalculatorState:
        """Insert or replace the inputs stored under a key"""
        payload = json.dumps(inputs.to_dict(), sort_keys=True)

        state = self.get_state(storage_key)
        if state is None:
            state = CalculatorState(storage_key=storage_key, payload=payload)
            self.session.add(state)
        else:
            state.payload = payload
            state.updated_at = datetime.utcnow()

        self.session.commit()
        logger.debug("Saved calculator state for key %r", storage_key)
        return state

    def clear_inputs(self, storage_key: str) -> bool:
        """Delete stored inputs; returns False when nothing was stored"""
        state = self.get_state(storage_key)
        if state is None:
            return False
        self.session.delete(state)
        self.session.commit()
        return True
