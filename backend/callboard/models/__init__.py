from callboard.models.missed_call import MissedCall
from callboard.models.sms_message import SmsMessage

__all__ = ["MissedCall", "SmsMessage"]
