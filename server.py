import socket
import threading
import time
from queue import Queue, Full

from config import SERVER_CONFIG, LOG_CONFIG, REJECT_MESSAGE, ERROR_MESSAGE
from log_setup import set_log, log_print
from parsing import evaluate

STOP = object()  # task that tells a calculate thread to exit

# ---- shared server state. Queue is thread safe on its own, the rest is guarded by 'lock'
def create_state(queue_size, logger, recv_timeout=SERVER_CONFIG["recv_timeout"]):
    lock = threading.Lock()
    return {
        "task_queue": Queue(maxsize=queue_size),
        "lock": lock,
        "idle": threading.Condition(lock),  # a calculate thread went idle
        "workers": [],                      # calculate thread status
        "client_status": {},                # per client task count and total time
        "logger": logger,
        "recv_timeout": recv_timeout,
    }

def parse_request(request):
    client_num, sep, expression = request.partition(":")
    if not sep:
        return "unknown", request.strip()
    return client_num.strip(), expression.strip()

def insert_client(client_socket, client_num, expression):
    return {
        "client_socket": client_socket,
        "client_num": client_num,
        "expression": expression,
    }

def record_task(state, client_num, op_time):
    with state["lock"]:
        totals = state["client_status"].setdefault(client_num, {"total_task": 0, "total_time": 0})
        totals["total_task"] += 1
        totals["total_time"] += op_time
        return dict(totals)

def waiting_thread(server_socket, state):
    logger = state["logger"]
    while True:
        try:
            client_socket, client_address = server_socket.accept()
        except OSError:
            log_print(logger, "server socket closed, waiting thread stopped")
            return
        # a silent client must not hold up the accept loop
        client_socket.settimeout(state["recv_timeout"])
        try:
            request = client_socket.recv(SERVER_CONFIG["recv_size"]).decode()
        except (OSError, UnicodeDecodeError) as e:
            log_print(logger, f"bad request from {client_address}: {e}")
            client_socket.close()
            continue

        client_num, expression = parse_request(request)
        task = insert_client(client_socket, client_num, expression)
        try:
            state["task_queue"].put_nowait(task)
        except Full:
            log_print(logger, f"client {client_num} task rejected, queue is full: {expression}")
            try:
                client_socket.sendall(REJECT_MESSAGE.encode())
            except OSError as e:
                log_print(logger, f"client {client_num} reject reply failed: {e}")
            finally:
                client_socket.close()
            continue
        log_print(logger, f"client {client_num} requested {expression}. assigned to waiting thread")

def management_thread(state):
    logger = state["logger"]
    while True:
        task = state["task_queue"].get()
        if task is STOP:
            stop_workers(state)
            log_print(logger, "management thread stopped")
            return
        log_print(logger, f"waiting thread >> management thread {task['expression']}")

        with state["idle"]:
            worker = next((w for w in state["workers"] if not w["busy"]), None)
            if worker is None:
                log_print(logger, "thread is full!")
            while worker is None:
                state["idle"].wait()
                worker = next((w for w in state["workers"] if not w["busy"]), None)
            assign_task(worker, task)
        log_print(logger, f"management thread >> calculate thread {task['expression']}")

def stop_workers(state):
    for worker in state["workers"]:
        with state["idle"]:
            while worker["busy"]:
                state["idle"].wait()
            assign_task(worker, STOP)

def assign_task(worker, task):
    with worker["condition"]:
        worker["task"] = task
        worker["busy"] = True
        worker["condition"].notify()

def calculate_thread(worker, state):
    while True:
        with worker["condition"]:
            while not worker["busy"]:
                worker["condition"].wait()
            task = worker["task"]
        if task is STOP:
            return
        process_task(task, state)
        with state["idle"]:
            worker["task"] = None
            worker["busy"] = False
            state["idle"].notify_all()

def process_task(task, state):
    logger = state["logger"]
    client_socket = task["client_socket"]
    client_num = task["client_num"]
    expression = task["expression"]

    start = time.perf_counter()
    outcome = evaluate(expression)
    op_time = round((time.perf_counter() - start) * 1000, 3)
    if outcome.ok:
        reply = str(outcome.value)
    else:
        reply = ERROR_MESSAGE
        log_print(logger, f"client {client_num} {expression} failed: {type(outcome.error).__name__}: {outcome.error}")

    totals = record_task(state, client_num, op_time)
    try:
        client_socket.sendall(reply.encode())
    except OSError as e:
        log_print(logger, f"client {client_num} reply failed: {e}")
    finally:
        client_socket.close()
    log_print(logger, f"task done. sent to client {client_num} : {expression} = {reply}, op time : {op_time}ms")
    log_print(logger, f"client {client_num} total tasks : {totals['total_task']}, total op time : {totals['total_time']}ms, "
                      f"average op time : {round(totals['total_time'] / totals['total_task'], 1)}ms")

def run_server(host, port, num_workers=SERVER_CONFIG["num_workers"], queue_size=SERVER_CONFIG["queue_size"],
               log_file=LOG_CONFIG["server_log"], recv_timeout=SERVER_CONFIG["recv_timeout"]):
    logger = set_log("Server", log_file)
    state = create_state(queue_size, logger, recv_timeout)

    server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    server_socket.bind((host, port))
    server_socket.listen(5)
    log_print(logger, f"server started on {server_socket.getsockname()}")

    for _ in range(num_workers):
        worker = {
            "busy": False,
            "task": None,
            "condition": threading.Condition(),
        }
        state["workers"].append(worker)
        threading.Thread(target=calculate_thread, args=(worker, state), daemon=True).start()

    threading.Thread(target=waiting_thread, args=(server_socket, state), daemon=True).start()
    threading.Thread(target=management_thread, args=(state,), daemon=True).start()
    return server_socket, state

def shutdown_server(server_socket, state):
    try:
        server_socket.shutdown(socket.SHUT_RDWR)  # wakes the blocked accept()
    except OSError:
        pass
    server_socket.close()
    state["task_queue"].put(STOP)

if __name__ == "__main__":
    server_socket, state = run_server(SERVER_CONFIG["host"], SERVER_CONFIG["port"])
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        shutdown_server(server_socket, state)
