import os

from shortlinks.constants import ENV


def running_locally() -> bool:
    """Tell whether the handler runs under `sam local` rather than in AWS.

    APP_ENV=local or AWS_SAM_LOCAL=true (set by the SAM CLI) count as local.
    """
    if os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true':
        return True
    return os.getenv(ENV.App.APP_ENV, '').lower() == 'local'
