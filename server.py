import logging
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=os.getenv("SPECSHEET_LOG_LEVEL", "INFO").upper())

import uvicorn
from api.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=os.getenv("SPECSHEET_HOST", "127.0.0.1"), port=int(os.getenv("SPECSHEET_PORT", "8000")))
