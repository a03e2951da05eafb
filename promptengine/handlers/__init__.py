from . import user

def get_routers():
    return [
        user.router
    ]
