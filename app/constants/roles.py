ADMIN_ROLE = "admin"
USER_ROLE = "user"
