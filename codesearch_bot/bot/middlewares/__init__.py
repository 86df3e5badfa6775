from codesearch_bot.bot.middlewares.throttle import ThrottleMiddleware

__all__ = ["ThrottleMiddleware"]
