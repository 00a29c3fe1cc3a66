def register_blueprints(app):
    from coachdesk.routes.api import api_bp
    from coachdesk.routes.athlete import athlete_bp

    app.register_blueprint(athlete_bp, url_prefix="/api/athlete")
    app.register_blueprint(api_bp, url_prefix="/api")
