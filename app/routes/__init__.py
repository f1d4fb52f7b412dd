"""Routes package for the content backend."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .auth import auth_bp
    from .posts import posts_bp
    from .categories import categories_bp
    from .faqs import faqs_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(categories_bp, url_prefix='/api/categories')
    app.register_blueprint(faqs_bp, url_prefix='/api/faq')
