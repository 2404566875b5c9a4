from django.dispatch import Signal

# Sent by SessionProvider whenever its principal changes.
# Arguments: principal (CustomUser or None), event ('signed_in', 'signed_up',
# 'signed_out' or 'restored').
session_changed = Signal()
