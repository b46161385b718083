#!/usr/bin/env python3
"""
Entry point for the packet labeling application.

Usage:
    python main.py packet.bin [--results saved.json] [--config config.json]
"""
import argparse
import logging
import os
import sys

from PySide6.QtWidgets import QApplication

from packetlabel.application.app import initialize_app
from packetlabel.domain.services.i_selection_workflow_service import ISelectionWorkflowService
from packetlabel.infrastructure.annotation.in_memory_annotation_store import InMemoryAnnotationStore
from packetlabel.infrastructure.config.json_config_repository import JsonConfigRepository
from packetlabel.infrastructure.logging.logger_service import ConsoleLoggerService
from packetlabel.infrastructure.ui.qt_byte_grid_view import QtByteGridView
from packetlabel.infrastructure.ui.qt_ui_service import QtUIService
from packetlabel.presentation.components.packet_labeling_window import PacketLabelingWindow
from packetlabel.utils.logging_config import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Label byte ranges of a binary packet.")
    parser.add_argument("packet", help="Binary file to label")
    parser.add_argument("--results", help="JSON file with previously exported regions")
    parser.add_argument("--config", default=os.path.join(os.getcwd(), "config.json"),
                        help="Configuration file (created with defaults if missing)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--log-dir", default=None, help="Directory for log files")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_dir)
    logger = ConsoleLoggerService(level=getattr(logging, args.log_level))

    try:
        with open(args.packet, "rb") as f:
            content = f.read()
    except OSError as e:
        logger.critical(f"Cannot read packet file: {e}")
        return 1

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Packet Labeling")

    config_repo = JsonConfigRepository(args.config, logger)
    grid_view = QtByteGridView(
        palette=config_repo.get_highlight_palette(),
        logger=logger,
        bytes_per_row=config_repo.get_global_setting("bytes_per_row", 16)
    )
    ui_service = QtUIService(logger)

    container = initialize_app(
        content,
        view_binding=grid_view,
        ui_service=ui_service,
        config_repository=config_repo,
        logger=logger
    )

    window = PacketLabelingWindow(container, grid_view)
    ui_service.set_parent(window)

    records = None
    if args.results:
        read_result = InMemoryAnnotationStore.read_results(args.results)
        if read_result.is_failure:
            ui_service.show_message("Cannot load results", str(read_result.error), "error")
        else:
            records = read_result.value

    mount_result = container.resolve(ISelectionWorkflowService).mount(records)
    if mount_result.is_failure:
        logger.error(f"Failed to restore saved regions: {mount_result.error}")
        ui_service.show_message("Cannot restore regions", str(mount_result.error), "error")

    window.refresh()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
