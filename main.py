import argparse
import logging
import sys
import traceback
from dataclasses import replace
from datetime import datetime

from PyQt5.QtWidgets import (QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                             QStatusBar, QPushButton, QLabel, QGroupBox, QTabWidget, QLineEdit)
from PyQt5.QtCore import Qt, QTimer, pyqtSlot
from PyQt5.QtGui import QFont, QIntValidator
from PyQt5.QtNetwork import QNetworkConfigurationManager

# Local imports
import config
from context import AppContext
from controllers.sensor_adapter import MockSensorAdapter, SensorAdapter
from data_model import Channel, InvalidCapacity
from services.dashboard_service import DashboardService
from services.sensor_service import SensorService
from services.settings_store import SettingsStore
from ui.channel_chart import ChannelChart
from ui.render_sync import format_label
from ui.settings_widget import SettingsWidget

logger = logging.getLogger(__name__)

INVALID_TIMEFRAME_MSG = (
    f"Please enter a valid time between {config.MIN_CAPACITY} and {config.MAX_CAPACITY} seconds"
)


class MainWindow(QMainWindow):
    def __init__(self, ctx: AppContext, store: SettingsStore, adapter):
        super().__init__()
        self.setWindowTitle(config.APP_NAME)
        self.setMinimumSize(*config.MIN_WINDOW_SIZE)

        # Initialize core components
        self.ctx = ctx
        self.store = store
        self.dashboard = DashboardService(ctx)
        self.sensor_service = SensorService(adapter, parent=self)
        self.charts = {}
        self._reported_errors = set()

        # Setup UI
        self.setup_ui()
        self.connect_signals_and_slots()
        self.apply_theme()

        # Start timers and acquisition
        self.initialize_timers()
        self.sensor_service.start(ctx.settings.refresh_interval_s)
        self.notify("System initialized")

    def setup_ui(self):
        """Main UI setup method."""
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)

        # Status Bar
        self.status = QStatusBar()
        self.setStatusBar(self.status)
        self.network_label = QLabel()
        self.clock_label = QLabel()
        self.status.addPermanentWidget(self.network_label)
        self.status.addPermanentWidget(self.clock_label)

        main_layout.addWidget(self._create_overview_group())

        bottom_layout = QHBoxLayout()
        bottom_layout.addWidget(self._create_plots_group(), stretch=3)
        side_layout = QVBoxLayout()
        side_layout.addWidget(self._create_recommendations_group())
        self.settings_widget = SettingsWidget(self.ctx.settings)
        side_layout.addWidget(self.settings_widget)
        side_layout.addStretch(1)
        bottom_layout.addLayout(side_layout, stretch=1)
        main_layout.addLayout(bottom_layout)

        self._update_network_label()

    def _create_overview_group(self):
        """Creates the dashboard overview cards and global buttons."""
        self.overview_group = QGroupBox("Smart Agriculture Dashboard")
        layout = QVBoxLayout(self.overview_group)
        cards_layout = QHBoxLayout()
        cards_layout.setSpacing(15)
        self.cards = []

        # Factory function for creating a card
        def create_card(title, initial_text="--"):
            card = QGroupBox()
            card.setMinimumSize(160, 110)
            card_layout = QVBoxLayout(card)
            card_layout.addWidget(QLabel(title, alignment=Qt.AlignCenter))
            value_label = QLabel(initial_text, alignment=Qt.AlignCenter)
            value_label.setFont(QFont("Segoe UI", 18, QFont.Bold))
            card_layout.addWidget(value_label)
            self.cards.append(card)
            return card, value_label

        temp_card, self.lbl_temp_value = create_card("Temperature", "--°C")
        moist_card, self.lbl_moisture_value = create_card("Soil Moisture", "--%")
        crop_card, self.lbl_crop_value = create_card("Recommended Crop")
        cards_layout.addWidget(temp_card)
        cards_layout.addWidget(moist_card)
        cards_layout.addWidget(crop_card)
        layout.addLayout(cards_layout)

        footer = QHBoxLayout()
        self.uptime_label = QLabel(self.ctx.status.uptime_text())
        footer.addWidget(self.uptime_label)
        footer.addStretch(1)
        self.refresh_btn = QPushButton("Refresh")
        self.theme_btn = QPushButton()
        footer.addWidget(self.refresh_btn)
        footer.addWidget(self.theme_btn)
        layout.addLayout(footer)
        return self.overview_group

    def _create_plots_group(self):
        """Creates one chart tab per channel plus the timeframe controls."""
        self.plots_group = QGroupBox("Sensor Data")
        layout = QVBoxLayout(self.plots_group)
        self.tabs = QTabWidget()
        self.last_update_labels = {}

        # Factory function for creating a plot tab
        def create_plot_tab(channel):
            tab = QWidget()
            tab_layout = QVBoxLayout(tab)
            last_update = QLabel("Last update: --", alignment=Qt.AlignRight)
            tab_layout.addWidget(last_update)
            chart = ChannelChart(channel)
            tab_layout.addWidget(chart)
            self.tabs.addTab(tab, channel.display_name)
            return chart, last_update

        for channel in Channel:
            chart, last_update = create_plot_tab(channel)
            self.charts[channel] = chart
            self.last_update_labels[channel] = last_update
            self.ctx.render_sync.attach(channel, chart)
        layout.addWidget(self.tabs)

        timeframe_layout = QHBoxLayout()
        self.timeframe_buttons = []
        for seconds, text in config.TIMEFRAME_PRESETS:
            btn = QPushButton(text)
            btn.clicked.connect(lambda _checked=False, s=seconds: self.set_timeframe(s))
            self.timeframe_buttons.append(btn)
            timeframe_layout.addWidget(btn)
        self.custom_time_edit = QLineEdit()
        self.custom_time_edit.setPlaceholderText("Sec")
        self.custom_time_edit.setValidator(QIntValidator(0, 99999))
        self.custom_time_edit.setMaximumWidth(80)
        self.custom_time_btn = QPushButton("Set")
        timeframe_layout.addWidget(self.custom_time_edit)
        timeframe_layout.addWidget(self.custom_time_btn)
        timeframe_layout.addStretch(1)
        layout.addLayout(timeframe_layout)
        return self.plots_group

    def _create_recommendations_group(self):
        self.recommendations_group = QGroupBox("Crop Recommendations")
        layout = QVBoxLayout(self.recommendations_group)
        self.recommendations_label = QLabel("Waiting for sensor data...")
        self.recommendations_label.setWordWrap(True)
        self.recommendations_label.setAlignment(Qt.AlignTop | Qt.AlignLeft)
        layout.addWidget(self.recommendations_label)
        return self.recommendations_group

    def connect_signals_and_slots(self):
        """Central place to connect all signals to slots."""
        # Acquisition
        self.sensor_service.sample_received.connect(self.on_sample)
        self.sensor_service.fetch_failed.connect(self.on_fetch_failed)

        # Buttons
        self.refresh_btn.clicked.connect(self.refresh_data)
        self.theme_btn.clicked.connect(self.toggle_theme)
        self.custom_time_btn.clicked.connect(self.set_custom_timeframe)
        self.custom_time_edit.returnPressed.connect(self.set_custom_timeframe)

        # Settings
        self.settings_widget.settings_saved.connect(self.on_settings_saved)

        # Network connectivity
        self.network_manager = QNetworkConfigurationManager(self)
        self.network_manager.onlineStateChanged.connect(self.on_online_changed)

    def initialize_timers(self):
        """Setup and start the clock timer (acquisition is timed by SensorService)."""
        self.clock_timer = QTimer(self)
        self.clock_timer.timeout.connect(self.update_clock)
        self.clock_timer.start(config.CLOCK_INTERVAL_MS)
        self.update_clock()

    # --- Notifications ---

    def notify(self, message, level=logging.INFO):
        """Transient status bar message, mirrored to the log."""
        logger.log(level, message)
        self.status.showMessage(message, config.TOAST_TIMEOUT_MS)

    # --- Core Logic Methods ---

    @pyqtSlot(object)
    def on_sample(self, sample):
        """One successful acquisition: apply it, then repaint cards and advice."""
        result = self.dashboard.apply_sample(sample)
        if not result.ok:
            self.notify("Failed to update sensor data", logging.WARNING)
            return

        if sample.temperature is not None:
            self.lbl_temp_value.setText(f"{sample.temperature:.1f}°C")
        if sample.moisture is not None:
            self.lbl_moisture_value.setText(f"{sample.moisture:.1f}%")
        self._show_recommendations(result.advisories)

        stamp = format_label(sample.timestamp)
        for label in self.last_update_labels.values():
            label.setText(f"Last update: {stamp}")

    @pyqtSlot(str)
    def on_fetch_failed(self, reason):
        self.dashboard.apply_failure(reason)
        self.notify("Failed to update sensor data", logging.WARNING)

    def _show_recommendations(self, advisories):
        self.recommendations_label.setText("\n".join(advisories) if advisories else "--")
        self.lbl_crop_value.setText(self.dashboard.highlight)

    def set_timeframe(self, seconds):
        try:
            self.dashboard.resize(seconds)
        except InvalidCapacity:
            self.notify(INVALID_TIMEFRAME_MSG, logging.WARNING)
            return
        self.notify(f"Chart timeframe set to {seconds} seconds")

    def set_custom_timeframe(self):
        try:
            seconds = int(self.custom_time_edit.text())
        except ValueError:
            self.notify(INVALID_TIMEFRAME_MSG, logging.WARNING)
            return
        self.set_timeframe(seconds)

    def refresh_data(self):
        self.sensor_service.refresh_now()
        self.notify("Refreshing data...")

    def update_clock(self):
        now = datetime.now()
        self.clock_label.setText(now.strftime("%H:%M:%S"))
        self.uptime_label.setText(self.ctx.status.uptime_text(now))

    # --- Settings & Theme ---

    @pyqtSlot(object)
    def on_settings_saved(self, settings):
        settings = replace(settings, dark_mode=self.ctx.settings.dark_mode)
        self.store.save(settings)
        advisories = self.dashboard.update_settings(settings)
        if self.ctx.latest_sample is not None:
            self._show_recommendations(advisories)
        self.sensor_service.restart(settings.refresh_interval_s)
        self.notify("Settings saved")

    def toggle_theme(self):
        settings = replace(self.ctx.settings, dark_mode=not self.ctx.settings.dark_mode)
        self.ctx.settings = settings
        self.store.save(settings)
        self.apply_theme()

    def apply_theme(self):
        styles = config.DARK_STYLES if self.ctx.settings.dark_mode else config.STYLES
        self.centralWidget().setStyleSheet(styles["main_window"])
        for group in (self.overview_group, self.plots_group, self.recommendations_group, self.settings_widget):
            group.setStyleSheet(styles["group_box"])
        for card in self.cards:
            card.setStyleSheet(styles["card"])
        for chart in self.charts.values():
            chart.apply_theme(styles)
        self.refresh_btn.setStyleSheet(styles["primary_btn"])
        self.theme_btn.setStyleSheet(styles["secondary_btn"])
        self.theme_btn.setText("Light Mode" if self.ctx.settings.dark_mode else "Dark Mode")
        self._update_network_label()

    # --- Connectivity & Errors ---

    @pyqtSlot(bool)
    def on_online_changed(self, online):
        if not self.dashboard.set_online(online):
            return
        self._update_network_label()
        if online:
            self.notify("Network connection restored")
            self.sensor_service.refresh_now()
        else:
            self.notify("Network connection lost", logging.WARNING)

    def _update_network_label(self):
        styles = config.DARK_STYLES if self.ctx.settings.dark_mode else config.STYLES
        online = self.ctx.status.record.online
        self.network_label.setText("Connected" if online else "Offline")
        self.network_label.setStyleSheet(styles["status_online" if online else "status_offline"])

    def handle_uncaught(self, exc_type, exc, tb):
        """sys.excepthook target: log, record, and notify once per failing location."""
        logger.error("Uncaught exception", exc_info=(exc_type, exc, tb))
        self.dashboard.record_app_error(str(exc) or exc_type.__name__)
        frames = traceback.extract_tb(tb)
        key = (frames[-1].filename, frames[-1].lineno) if frames else (exc_type.__name__, 0)
        if key not in self._reported_errors:
            self._reported_errors.add(key)
            self.notify("An error occurred in the application. Some features may be limited.", logging.ERROR)

    def closeEvent(self, event):
        """Ensure threads are cleaned up properly on exit."""
        self.clock_timer.stop()
        self.sensor_service.stop()
        super().closeEvent(event)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=config.APP_NAME)
    parser.add_argument("--url", default=config.API_URL, help="sensor endpoint (GET, JSON)")
    parser.add_argument("--mock", action="store_true", help="use random readings instead of the endpoint")
    parser.add_argument("--settings-file", help="INI file for user settings (default: platform location)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = QApplication(sys.argv[:1])
    app.setOrganizationName(config.APP_ORGANIZATION)
    app.setApplicationName(config.APP_NAME)
    app.setFont(QFont("Segoe UI", 9))

    store = SettingsStore.from_file(args.settings_file) if args.settings_file else SettingsStore()
    ctx = AppContext.create(settings=store.load())
    adapter = MockSensorAdapter() if args.mock else SensorAdapter(args.url)
    logger.info("Reading sensor data from %s", "mock source" if args.mock else args.url)

    window = MainWindow(ctx, store, adapter)
    sys.excepthook = window.handle_uncaught
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
