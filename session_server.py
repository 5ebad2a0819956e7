# Session server reading its settings from $SESSION_CONFIG or data/config/session_config.yml
from session_lib.config import load_config
from session_lib.main import create_app
app = create_app(load_config())
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
