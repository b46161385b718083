"""
Tests for the DI container and the application wiring.
"""

import pytest

from packetlabel.application.app import initialize_app
from packetlabel.domain.common.di_container import DIContainer
from packetlabel.domain.models.region_model import WindowOffset
from packetlabel.domain.services.i_annotation_store import IAnnotationStore
from packetlabel.domain.services.i_highlight_service import IHighlightService
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.services.i_region_service import IRegionService
from packetlabel.domain.services.i_selection_workflow_service import ISelectionWorkflowService
from packetlabel.infrastructure.config.json_config_repository import JsonConfigRepository


class TestDIContainer:

    def test_instance_registration(self):
        container = DIContainer()
        marker = object()
        container.register_instance(object, marker)
        assert container.resolve(object) is marker

    def test_factory_runs_every_time(self):
        container = DIContainer()
        container.register_factory(list, lambda: [])
        assert container.resolve(list) is not container.resolve(list)

    def test_singleton_runs_once(self):
        container = DIContainer()
        container.register_singleton(list, lambda: [])
        assert container.resolve(list) is container.resolve(list)

    def test_unregistered_type(self):
        with pytest.raises(ValueError):
            DIContainer().resolve(dict)

    def test_circular_dependency(self):
        container = DIContainer()
        container.register_factory(list, lambda: container.resolve(dict))
        container.register_factory(dict, lambda: container.resolve(list))
        with pytest.raises(ValueError, match="Circular"):
            container.resolve(list)

    def test_is_registered(self):
        container = DIContainer()
        container.register_factory(list, lambda: [])
        assert container.is_registered(list)
        assert not container.is_registered(dict)


class TestInitializeApp:

    @pytest.fixture
    def container(self, content, view, ui, logger, tmp_path):
        repo = JsonConfigRepository(str(tmp_path / "config.json"), logger)
        return initialize_app(content, view, ui, config_repository=repo, logger=logger)

    def test_services_share_one_store(self, container):
        store = container.resolve(IAnnotationStore)
        assert container.resolve(IRegionService).store is store
        assert container.resolve(IHighlightService).store is store
        assert container.resolve(ISelectionWorkflowService).store is store

    def test_logger_registered(self, container, logger):
        assert container.resolve(ILoggerService) is logger

    def test_controls_from_config(self, container):
        store = container.resolve(IAnnotationStore)
        control = store.controls()[0]
        assert control.name == "labels"
        assert control.to_name == store.packet().name == "packet"
        assert "PAYLOAD" in control.label_colors

    def test_end_to_end_labeling(self, container, view):
        workflow = container.resolve(ISelectionWorkflowService)
        store = container.resolve(IAnnotationStore)
        store.select_labels("labels", ["LENGTH"])

        workflow.mount()
        view.select(4, 12)
        workflow.confirm_area()
        view.select(0, 4)
        region = workflow.handle_mouse_up().value

        assert (region.start, region.end) == (4, 8)
        exported = store.export_results()
        assert exported[0]["value"]["windowOffset"] == WindowOffset(4, 12).to_dict()
        assert exported[0]["value"]["labels"] == ["LENGTH"]
