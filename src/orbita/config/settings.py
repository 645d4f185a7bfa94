"""
ORBITA Global Configuration
============================
Central configuration for tick timing, buffer bounds, risk constants,
alert thresholds, and service parameters.
"""

# --- Session Loop ---
TICK_INTERVAL_MS = 2500   # one reading every 2.5s
HISTORY_MAX = 50          # readings kept in the rolling buffer

# --- Synthetic Telemetry ---
# (base, random span) -> base + randint[0, span)
SAMPLE_RANGES = {
    "heart_rate": (72, 8),
    "stress": (15, 35),
    "respiration": (16, 2),
    "hrv": (60, 10),
}
FATIGUE_BASE = 5.0
FATIGUE_PER_TICK = 0.35
FATIGUE_MAX = 100.0

# --- Risk Score ---
RISK_BASELINE = 12.0
RISK_RETENTION = 0.92      # weight on the previous score
RISK_INPUT_SCALE = 0.10    # scale on the instantaneous term
RISK_WEIGHTS = {
    "stress": 0.15,
    "fatigue": 0.25,
    "heart_rate": 0.10,
}
RISK_HR_RESTING = 60       # bpm subtracted before weighting
RISK_RECOVERY_VALUE = 28.0

# Risk level bands (score >= risk_min)
RISK_LEVELS = {
    "LOW": {"risk_min": 0, "risk_max": 30},
    "MODERATE": {"risk_min": 30, "risk_max": 70},
    "HIGH": {"risk_min": 70, "risk_max": 94},
    "CRITICAL": {"risk_min": 94, "risk_max": None},  # strictly above 94
}

# --- Cognitive Load (display metric) ---
COGNITIVE_LOAD_BASELINE = 4.2
COGNITIVE_LOAD_RETENTION = 0.97
COGNITIVE_LOAD_FLOOR = 3.5
COGNITIVE_LOAD_SPAN = 1.5

# --- Alerts ---
ALERT_THRESHOLDS = {
    "HR_SPIKE": {"field": "heart_rate", "above": 85},
    "STRESS_LVL": {"field": "stress", "above": 45},
}
ALERT_EXPIRY_SEC = 10.0    # high severity never expires
ALERT_MAX_ACTIVE = 5

# --- Directives ---
TASK_MAX_VISIBLE = 2

# --- Assistant (Groq) ---
GROQ_MODEL = "llama-3.3-70b-versatile"
GROQ_WHISPER_MODEL = "whisper-large-v3-turbo"
GROQ_MAX_TOKENS = 600
GROQ_TEMPERATURE = 0.2
GROQ_TIMEOUT_SEC = 20.0

ASSISTANT_GREETING = "OTC tactical core initialized. Biometric link verified. Input command."
ASSISTANT_FALLBACK = "LINK_TIMEOUT. Verify neural interface link."
ASSISTANT_EMPTY_RESPONSE = "RETRY: Connection lag."
VOICE_COMMAND_LABEL = "VOICE_CMD_EXEC"

# --- API / Server ---
API_HOST = "0.0.0.0"
API_PORT = 8000
