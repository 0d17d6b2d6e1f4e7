"""Model registry: persists the configuration of each mining run."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trendminer.database.models import CustomModel

from .exceptions import UpstreamError

logger = logging.getLogger(__name__)


class ModelRegistry:
    """Registry for custom model runs.

    Write-only from the miner's point of view: a run is recorded once, before
    mining starts, and its generated id is echoed back in the response.
    """

    def __init__(self, db_session: Session):
        self.db = db_session

    def record_run(self, model_name: str, selected_features: list[str], target_column: str) -> str:
        """Record a model run and return its generated model id.

        Args:
            model_name: Display name chosen by the user
            selected_features: Features mined over, in selection order
            target_column: Resolved outcome column (not the public target name)

        Returns:
            The model id generated for this run

        Raises:
            UpstreamError: If the registry write fails; the request cannot continue
        """
        run = CustomModel(
            model_name=model_name,
            selected_features=list(selected_features),
            target=target_column,
        )
        try:
            self.db.add(run)
            self.db.commit()
            self.db.refresh(run)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Error saving model %s", model_name)
            raise UpstreamError(f"Failed to save model: {e}") from e

        logger.info("Model saved: %s (%s)", run.model_id, model_name)
        return run.model_id
