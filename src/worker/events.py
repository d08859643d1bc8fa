"""Worker event names.

Inbound messages carry one of these names in ``action``; outbound messages
carry one in ``type``.
"""

from enum import Enum


class WorkerEvent(str, Enum):
    # inbound
    TRAIN_MODEL = "train:model"
    RECOMMEND = "recommend"

    # outbound
    PROGRESS_UPDATE = "progress:update"
    TRAINING_LOG = "training:log"
    TRAINING_COMPLETE = "training:complete"
