APP_NAME = "Smart Agriculture Monitor"
APP_ORGANIZATION = "SmartAgri"
APP_VERSION = "1.0.0"
MIN_WINDOW_SIZE = (1200, 800)
CLOCK_INTERVAL_MS = 1000  # Clock / uptime display, touches no sensor data
TOAST_TIMEOUT_MS = 5000   # How long a status bar notification stays visible

# --- Sensor endpoint ---
API_URL = "http://localhost/api/sensor-data"
REQUEST_TIMEOUT_S = 10.0

# --- Acquisition ---
DEFAULT_REFRESH_INTERVAL_S = 30
REFRESH_INTERVAL_RANGE = (1, 3600)
# A wall clock further than this behind the newest point restarts the series
CLOCK_STEP_TOLERANCE_S = 2

# --- Chart timeframe (points per channel, one per acquisition) ---
DEFAULT_CAPACITY = 30
MIN_CAPACITY = 5
MAX_CAPACITY = 3600
TIMEFRAME_PRESETS = ((30, "30s"), (60, "1m"), (300, "5m"))
MAX_AXIS_LABELS = 10  # Bottom axis shows at most this many MM:SS ticks

# Readings outside these bounds are stored as gaps
CHANNEL_RANGES = {
    "temperature": (-40.0, 85.0),   # °C
    "moisture": (0.0, 100.0),       # %
    "pressure": (300.0, 1100.0),    # hPa
    "altitude": (-500.0, 9000.0),   # m
}

CHANNEL_UNITS = {
    "temperature": "°C",
    "moisture": "%",
    "pressure": "hPa",
    "altitude": "m",
}

CHART_COLORS = {
    "temperature": "#ff4444",
    "pressure": "#2196f3",
    "moisture": "#9c27b0",
    "altitude": "#4caf50",
}

# --- Mock source (demo without hardware) ---
MOCK_TEMPERATURE_RANGE = (22.0, 27.0)
MOCK_MOISTURE_RANGE = (45.0, 65.0)

# --- UI & Styling ---
# Light and dark stylesheets share keys so the theme toggle is a dictionary swap
STYLES = {
    "main_window": "background-color: #f4f6f8; color: #222;",
    "group_box": """
        QGroupBox {
            background-color: #ffffff;
            border: 1px solid #d0d7de;
            border-radius: 10px;
            color: #222;
            font-weight: bold;
            margin-top: 1ex;
        }
        QGroupBox::title {
            subcontrol-origin: margin;
            subcontrol-position: top center;
            padding: 0 5px;
        }
    """,
    "card": "QGroupBox { background-color:#e8f0fe; border-radius:10px; color:#222; }",
    "chart_background": "w",
    "primary_btn": "padding:6px; border-radius:5px; background:#2196f3; color:white;",
    "secondary_btn": "padding:6px; border-radius:5px; background:#9e9e9e; color:white;",
    "status_online": "font-weight: bold; color: #2e7d32;",
    "status_offline": "font-weight: bold; color: #c62828;",
}

DARK_STYLES = {
    "main_window": "background-color: #333333; color: #eee;",
    "group_box": """
        QGroupBox {
            background-color: #2c2c2c;
            border: 1px solid #444;
            border-radius: 10px;
            color: white;
            font-weight: bold;
            margin-top: 1ex;
        }
        QGroupBox::title {
            subcontrol-origin: margin;
            subcontrol-position: top center;
            padding: 0 5px;
        }
    """,
    "card": "QGroupBox { background-color:#4e6d94; border-radius:10px; color:white; }",
    "chart_background": "k",
    "primary_btn": "padding:6px; border-radius:5px; background:#4CAF50; color:white;",
    "secondary_btn": "padding:6px; border-radius:5px; background:#616161; color:white;",
    "status_online": "font-weight: bold; color: #55FF55;",
    "status_offline": "font-weight: bold; color: #FF5555;",
}
