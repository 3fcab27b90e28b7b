"""Lifecycle publisher module for pub/sub event publishing."""

import logging
from pubsub import pub

from ..models.events import TranscriptionCompleted
from ..models.session import RecordingStateUpdate

logger = logging.getLogger(__name__)

STATE_TOPIC = "recording.state_changed"
COMPLETION_TOPIC = "transcription.completed"


class LifecyclePublisher:
    """Publishes session lifecycle events using pubsub.pub.

    Delivery is best-effort: a failing listener is logged and never
    propagates to the publisher's caller.
    """

    def __init__(self, state_topic: str = STATE_TOPIC, completion_topic: str = COMPLETION_TOPIC):
        """Initialize lifecycle publisher.

        Args:
            state_topic: Topic for state transitions
            completion_topic: Topic for completed transcriptions
        """
        self.state_topic = state_topic
        self.completion_topic = completion_topic
        logger.info(f"LifecyclePublisher initialized with topics: {state_topic}, {completion_topic}")

    def publish_state(self, update: RecordingStateUpdate) -> None:
        """Publish a state transition.

        Args:
            update: New state and session id
        """
        self._send(self.state_topic, update=update)
        logger.debug(f"Published state change: {update.state.value} ({update.session_id})")

    def publish_completion(self, text: str) -> None:
        """Publish the final text of a finalized session.

        Args:
            text: Final transcription text
        """
        self._send(self.completion_topic, event=TranscriptionCompleted(text=text))
        logger.debug(f"Published transcription completion ({len(text)} chars)")

    def _send(self, topic: str, **message) -> None:
        try:
            pub.sendMessage(topic, **message)
        except Exception as e:
            logger.warning(f"Lifecycle listener on {topic} failed: {e}")
