import os
from dotenv import load_dotenv

load_dotenv()

dice_policy = os.getenv("DICE_POLICY", "exponential")
dice_alpha = float(os.getenv("DICE_ALPHA", "0.3"))
use_event_die = os.getenv("DICE_USE_EVENT_DIE", "true").lower() in ("1", "true", "yes")
dice_expire_hours = int(os.getenv("DICE_EXPIRE_HOURS", "24"))
log_level = os.getenv("LOG_LEVEL", "INFO").upper()

if __name__ == "__main__":
    print(dice_policy, dice_alpha, use_event_die, dice_expire_hours, log_level)
