# app_config.py

KV_FILE = "mediaplayer.kv"

AUDIO_MIME = "audio/*"
VIDEO_MIME = "video/*"

# seek bar / elapsed label refresh, seconds
PROGRESS_INTERVAL = 1.0

ICON_PLAY = "play-circle"
ICON_PAUSE = "pause-circle"

PICK_REQUEST_CODE = 7001
PERMISSION_REQUEST_CODE = 901

DIAG_FILENAME = "mediaplayer_diag.txt"
DEBUG_VERBOSE = True
