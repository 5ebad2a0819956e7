# Development server for the session application using the in-memory session store
from session_lib.config import SessionConfig
from session_lib.main import create_app
app = create_app(SessionConfig(store='memory', debug=True))
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
