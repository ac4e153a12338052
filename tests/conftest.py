"""Global test fixtures."""

import logfire

# Spans and FastAPI instrumentation become local no-ops; nothing is exported
logfire.configure(send_to_logfire=False, console=False)
