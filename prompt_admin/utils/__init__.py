from prompt_admin.utils.render import render_prompt_page, render_message_page, render_login_page

__all__ = ["render_prompt_page", "render_message_page", "render_login_page"]
