import socket
import sys
import threading
import time

from config import CLIENT_CONFIG, LOG_CONFIG, REJECT_MESSAGE, ERROR_MESSAGE
from log_setup import set_log, get_system_clock

def load_expressions(expression_file):
    with open(expression_file, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f.read().splitlines() if line.strip()]

# ---- send one request, wait for the reply. "" means no reply came back
def send_task(server_host, server_port, client_num, expression, logger, timeout=CLIENT_CONFIG["timeout"]):
    start_time = get_system_clock()
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as client_socket:
        client_socket.settimeout(timeout)
        message = f"{client_num}:{expression}"
        logger.info(f"[System Clock : {start_time}ms] [client {client_num}] requested {expression}")
        try:
            client_socket.connect((server_host, server_port))
            client_socket.sendall(message.encode())
            response = client_socket.recv(1024).decode()
        except (OSError, UnicodeDecodeError) as e:
            logger.info(f"[System Clock : {get_system_clock()}ms] [client {client_num}] no reply for {expression}: {e}")
            response = ""
    wait_time = round(get_system_clock() - start_time, 1)
    return response, start_time, wait_time

# ---- reply text -> value. anything but a number is a failed task
def parse_response(response):
    if response in (REJECT_MESSAGE, ERROR_MESSAGE):
        return None
    try:
        return float(response)
    except ValueError:
        return None

def receive_task(server_host, server_port, expression_file, client_num, log_file=None,
                 retry_delay=CLIENT_CONFIG["retry_delay"], max_retries=CLIENT_CONFIG["max_retries"]):
    task = load_expressions(expression_file)
    logger = set_log(f"Client{client_num}", log_file or LOG_CONFIG["client_log"].format(client_num=client_num))
    results = []
    re_task = []  # (expression, retries so far), sent again after the first pass
    re_count = 0
    total_wait_time = 0

    for expression in task:
        response, send_time, wait_time = send_task(server_host, server_port, client_num, expression, logger)
        if response == REJECT_MESSAGE:
            logger.info(f"[System Clock : {get_system_clock()}ms] client {client_num} task rejected : {expression}")
            re_task.append((expression, 0))
            re_count += 1
        else:
            total_wait_time += wait_time
            results.append((expression, parse_response(response)))
            logger.info(f"[System Clock : {send_time}ms] [client {client_num}] task done : {expression} = {response}, waited {wait_time}ms")
        time.sleep(retry_delay)

    while re_task:
        expression, retries = re_task.pop(0)
        response, send_time, wait_time = send_task(server_host, server_port, client_num, expression, logger)
        if response == REJECT_MESSAGE:
            if retries + 1 >= max_retries:
                logger.info(f"[System Clock : {get_system_clock()}ms] client {client_num} gave up after {max_retries} retries : {expression}")
                results.append((expression, None))
            else:
                re_task.append((expression, retries + 1))
                time.sleep(retry_delay)
            continue
        total_wait_time += wait_time
        results.append((expression, parse_response(response)))
        logger.info(f"[System Clock : {send_time}ms] client {client_num} retried task done : {expression} = {response}")

    total_task = len(task)
    avg_wait_time = round(total_wait_time / total_task, 1) if total_task > 0 else 0
    logger.info(f"client {client_num} - total tasks: {total_task}, average wait: {avg_wait_time} ms, rejected: {re_count}")
    return {
        "results": results,
        "total_task": total_task,
        "avg_wait_time": avg_wait_time,
        "rejected": re_count,
    }

def run_client(server_host, server_port, expression_files):
    client_threads = []
    summaries = {}

    def worker(expression_file, client_num):
        summaries[client_num] = receive_task(server_host, server_port, expression_file, client_num)

    for i, expression_file in enumerate(expression_files):
        client_thread = threading.Thread(target=worker, args=(expression_file, i + 1))
        client_thread.start()
        client_threads.append(client_thread)

    for client_thread in client_threads:
        client_thread.join()

    print(f"all expressions processed for {len(summaries)} clients")
    return summaries

if __name__ == "__main__":
    expression_files = sys.argv[1:] or CLIENT_CONFIG["expression_files"]
    run_client(CLIENT_CONFIG["server_host"], CLIENT_CONFIG["server_port"], expression_files)
