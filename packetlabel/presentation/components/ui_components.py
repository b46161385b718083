# packetlabel/presentation/components/ui_components.py
from PySide6.QtWidgets import QPushButton, QLabel, QGroupBox


class StyledButton(QPushButton):
    """Custom styled button with standard appearance."""
    def __init__(self, text, parent=None):
        super().__init__(text, parent)
        self.setStyleSheet("""
            QPushButton {
                background-color: #3a7ca5;
                color: white;
                padding: 8px 16px;
                border-radius: 4px;
            }
            QPushButton:hover {
                background-color: #2a6b94;
            }
            QPushButton:disabled {
                background-color: #9fb3c8;
            }
        """)


class LabelToggle(QPushButton):
    """Checkable button showing a label in its color."""
    def __init__(self, label: str, color: str, parent=None):
        super().__init__(label, parent)
        self.label = label
        self.setCheckable(True)
        self.setStyleSheet(f"""
            QPushButton {{
                border: 2px solid {color};
                border-radius: 4px;
                padding: 4px 10px;
            }}
            QPushButton:checked {{
                background-color: {color};
                color: white;
            }}
        """)


class AlertLabel(QLabel):
    """Inline warning shown under the grid."""
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWordWrap(True)
        self.setStyleSheet(
            "color: #8a1c1c; background-color: #fde8e8; padding: 6px; border-radius: 4px;"
        )
        self.hide()


class GroupHeader(QGroupBox):
    """Standard group box with consistent styling."""
    def __init__(self, title, parent=None):
        super().__init__(title, parent)
        self.setStyleSheet("""
            QGroupBox {
                font-weight: bold;
                border: 1px solid #cccccc;
                border-radius: 6px;
                margin-top: 10px;
                padding-top: 15px;
            }
            QGroupBox::title {
                subcontrol-origin: margin;
                subcontrol-position: top center;
                padding: 0 5px;
            }
        """)
