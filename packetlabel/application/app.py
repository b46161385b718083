# packetlabel/application/app.py

import os
import logging
from typing import List, Optional

from packetlabel.domain.common.di_container import DIContainer
from packetlabel.domain.models.labeling_control import LabelingControl
from packetlabel.domain.models.packet_model import PacketDocument
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.services.i_config_repository_service import IConfigRepository
from packetlabel.domain.services.i_view_binding import IViewBinding
from packetlabel.domain.services.i_ui_service import IUIService
from packetlabel.domain.services.i_annotation_store import IAnnotationStore
from packetlabel.domain.services.i_highlight_service import IHighlightService
from packetlabel.domain.services.i_region_service import IRegionService
from packetlabel.domain.services.i_selection_workflow_service import ISelectionWorkflowService

from packetlabel.infrastructure.logging.logger_service import ConsoleLoggerService
from packetlabel.infrastructure.config.json_config_repository import JsonConfigRepository
from packetlabel.infrastructure.annotation.in_memory_annotation_store import InMemoryAnnotationStore
from packetlabel.infrastructure.annotation.highlight_service import HighlightService
from packetlabel.infrastructure.annotation.region_service import RegionService
from packetlabel.infrastructure.annotation.selection_workflow_service import SelectionWorkflowService


def build_controls(config_repo: IConfigRepository) -> List[LabelingControl]:
    """Build the labeling controls described by the configuration."""
    return [
        LabelingControl(
            name=config_repo.get_global_setting("control_name", "labels"),
            to_name=config_repo.get_global_setting("to_name", "packet"),
            label_colors=config_repo.get_label_colors(),
        )
    ]


def initialize_app(content: bytes,
                   view_binding: IViewBinding,
                   ui_service: IUIService,
                   config_repository: Optional[IConfigRepository] = None,
                   config_file: Optional[str] = None,
                   logger: Optional[ILoggerService] = None,
                   packet_name: Optional[str] = None) -> DIContainer:
    """
    Wire the labeling services for one packet.

    The view binding and UI service are passed in so the same wiring runs
    against the Qt widgets or against test doubles.
    """
    container = DIContainer()

    # Core services
    if logger is None:
        logger = ConsoleLoggerService(level=logging.DEBUG)
    container.register_instance(ILoggerService, logger)

    if config_repository is None:
        config_file = config_file or os.path.join(os.getcwd(), "config.json")
        config_repository = JsonConfigRepository(config_file, logger)
    container.register_instance(IConfigRepository, config_repository)

    # View and UI
    container.register_instance(IViewBinding, view_binding)
    container.register_instance(IUIService, ui_service)

    # Annotation
    packet = PacketDocument(
        name=packet_name or config_repository.get_global_setting("to_name", "packet"),
        content=content
    )
    container.register_singleton(
        IAnnotationStore,
        lambda: InMemoryAnnotationStore(
            packet=packet,
            controls=build_controls(container.resolve(IConfigRepository)),
            logger=container.resolve(ILoggerService)
        )
    )

    container.register_singleton(
        IHighlightService,
        lambda: HighlightService(
            view_binding=container.resolve(IViewBinding),
            store=container.resolve(IAnnotationStore),
            palette=container.resolve(IConfigRepository).get_highlight_palette(),
            logger=container.resolve(ILoggerService)
        )
    )

    container.register_singleton(
        IRegionService,
        lambda: RegionService(
            store=container.resolve(IAnnotationStore),
            highlight_service=container.resolve(IHighlightService),
            logger=container.resolve(ILoggerService)
        )
    )

    container.register_singleton(
        ISelectionWorkflowService,
        lambda: SelectionWorkflowService(
            view_binding=container.resolve(IViewBinding),
            region_service=container.resolve(IRegionService),
            store=container.resolve(IAnnotationStore),
            ui_service=container.resolve(IUIService),
            logger=container.resolve(ILoggerService)
        )
    )

    logger.info("Application services initialized", packet=packet.name, length=packet.length)
    return container
