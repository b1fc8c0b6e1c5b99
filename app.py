from config import APP_DEBUG, APP_HOST, APP_PORT
from web.app_factory import create_app

app = create_app()


if __name__ == '__main__':
    app.logger.info('Server is up on port %s', APP_PORT)
    app.run(host=APP_HOST, port=APP_PORT, debug=APP_DEBUG)
