import os
import sys

# Add backend to path so tests can import main and routes
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault("D2BUFF_DATABASE_URL", "sqlite://")
os.environ.setdefault("D2BUFF_SMS_TRANSPORT", "log")
