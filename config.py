"""Settings for the evaluation server and the batch client"""

SERVER_CONFIG = {
    "host": "0.0.0.0",  # accept connections on every interface
    "port": 8000,
    "queue_size": 30,   # waiting tasks before requests are rejected
    "num_workers": 200,  # calculate threads
    "recv_size": 1024,
    "recv_timeout": 5.0,  # seconds a connection may stay silent before it is dropped
}

CLIENT_CONFIG = {
    "server_host": "127.0.0.1",
    "server_port": 8000,
    "retry_delay": 0.001,  # seconds between requests
    "max_retries": 50,     # resends of a rejected expression before giving up
    "timeout": 10.0,       # seconds to wait for a reply
    "expression_files": [
        "data/expression/expression1.txt",
        "data/expression/expression2.txt",
        "data/expression/expression3.txt",
        "data/expression/expression4.txt",
    ],
}

LOG_CONFIG = {
    "server_log": "Server.txt",
    "client_log": "Client{client_num}.txt",
    "format": "%(asctime)s - %(message)s",
    "datefmt": "%Y-%m-%d %H:%M:%S",
}

# ---- wire replies
REJECT_MESSAGE = "rejected"
ERROR_MESSAGE = "Error"
