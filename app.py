if __name__ != '__main__':
    raise ImportError('This is not a module. Please run app.py instead.')

import time
from dotenv import load_dotenv

load_dotenv()

from modules import database
from modules.logging_config import get_logger

logger = get_logger('crudclient.main')
VERSION = '1.0.0'


def action_on_mysql():
    db = None
    try:
        config = database.MySqlConfig.from_properties()
        db = database.Database(config)

        db.connect()
        logger.info('Successfully connected to MySQL database.')

        if db.is_database_empty():
            logger.info('Database is empty, initializing with sample data...')
            db.initialize_database()
            logger.info('Database initialized successfully.')

        all_users = db.find_all_users()
        logger.info(f'Total users in database: {len(all_users)}')
        for i, user in enumerate(all_users[:3], start=1):
            logger.info(f'User {i}: {user}')

        new_york_users = db.find_users_by_city('New York')
        logger.info(f'Found {len(new_york_users)} users in New York')

        logger.info(f'Total user count: {db.get_user_count()}')

        test_username = f'test_user_{int(time.time() * 1000)}'
        test_email = f'{test_username}@example.com'

        if db.insert_user(test_username, test_email, 25, 'Test City'):
            logger.info(f'Successfully inserted test user: {test_username}')

        if db.update_user_email(test_username, f'updated_{test_email}'):
            logger.info(f'Successfully updated email for user: {test_username}')

        if db.delete_user(test_username):
            logger.info(f'Successfully deleted test user: {test_username}')

    except database.DatabaseError as e:
        logger.error(f'MySQL error occurred: {e}', exc_info=True)
    except Exception as e:
        logger.error(f'Unexpected error occurred with MySQL: {e}', exc_info=True)
    finally:
        if db is not None:
            try:
                db.disconnect()
            except database.DatabaseError as e:
                logger.error(f'Error while disconnecting: {e}')


def main():
    logger.info(f'Starting CRUD client v{VERSION}...')
    action_on_mysql()
    logger.info('CRUD client finished.')


main()
