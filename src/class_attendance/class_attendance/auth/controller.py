from __future__ import annotations

from functools import wraps

from flask import Flask, current_app, flash, redirect, render_template, request, session, url_for

from ..core.enums import AuthEvent
from ..core.exceptions import AuthenticationError, ValidationError
from ..logging_config import get_logger

log = get_logger("auth")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            flash("Please sign in to continue.", "warning")
            return redirect(url_for("login"))

        # The account may have been removed since the cookie was issued.
        auth = current_app.extensions["class_attendance"].auth_service
        if auth.get_user(session["user_id"]) is None:
            log.warning("stale session cleared", extra={"context": {"user_id": session["user_id"]}})
            session.clear()
            flash("Your account could not be found. Please sign in again.", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> str:
    return str(session["user_id"])


def register(app: Flask, container) -> None:
    def _log_auth_event(event: AuthEvent, user_id: str) -> None:
        log.info("auth state changed", extra={"context": {"event": event.value, "user_id": user_id}})

    container.auth_service.on_auth_state_change(_log_auth_event)

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            try:
                s_user = container.auth_service.sign_in(
                    request.form.get("email", ""),
                    request.form.get("password", ""),
                )
                session.clear()
                session["user_id"] = s_user.user_id
                session["name"] = s_user.full_name
                session["email"] = s_user.email
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception:
                log.exception("sign-in failed")
                flash("System error while signing in", "danger")

        return render_template("login.html")

    @app.route("/register", methods=["GET", "POST"], endpoint="register")
    def register_account():
        if request.method == "POST":
            try:
                container.auth_service.sign_up(
                    email=request.form.get("email", ""),
                    password=request.form.get("password", ""),
                    full_name=request.form.get("full_name", ""),
                )
                flash("Account created. You can sign in now.", "success")
                return redirect(url_for("login"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                log.exception("sign-up failed")
                flash("System error while creating the account", "danger")

        return render_template("register.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        container.auth_service.sign_out(session.get("user_id"))
        session.clear()
        flash("Signed out.", "info")
        return redirect(url_for("login"))
