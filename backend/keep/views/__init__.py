from keep.views.auth_handlers import (
    auth_callback as auth_callback,
)
from keep.views.auth_handlers import (
    auth_code_error_page as auth_code_error_page,
)
from keep.views.auth_handlers import (
    forgot_password as forgot_password,
)
from keep.views.auth_handlers import (
    forgot_password_page as forgot_password_page,
)
from keep.views.auth_handlers import (
    reset_password as reset_password,
)
from keep.views.auth_handlers import (
    reset_password_page as reset_password_page,
)
from keep.views.auth_handlers import (
    sign_in as sign_in,
)
from keep.views.auth_handlers import (
    sign_in_page as sign_in_page,
)
from keep.views.auth_handlers import (
    sign_out as sign_out,
)
from keep.views.auth_handlers import (
    sign_up as sign_up,
)
from keep.views.auth_handlers import (
    sign_up_page as sign_up_page,
)
from keep.views.dashboard import (
    dashboard_page as dashboard_page,
)
from keep.views.dashboard import (
    home as home,
)
from keep.views.templates import (
    create_templates as create_templates,
)
