import asyncio
import inspect
import logging
from abc import abstractmethod
from typing import Dict, List, Callable, Any, Optional, Union

from ajam.exceptions import AJAMError

CONNECTED = 'connected'
DISCONNECTED = 'disconnected'
ERROR = 'error'
EVENT = 'event'

WAIT_EVENT_COMPLETE = 'WaitEventComplete'

Callback = Callable[[Any, 'AJAMClientBase'], Any]


class AJAMClientBase:
    """
    Base class of AJAM clients: notifications, login/logoff, the event loop and the
    command catalogue. Subclasses supply :meth:`execute`.
    """

    def __init__(self, host: str, port: int, username: Optional[str] = None,
                 secret: Optional[str] = None):
        """
        Initializes the AJAM Client

        :param host: The server host
        :param port: The server port
        :param username: The manager used by :meth:`login` when none is given
        :param secret: The secret of that manager
        """
        self.logger = logging.getLogger('AJAM Client')
        self._event_callbacks: Dict[str, List[Callback]] = {}
        self._loop_tasks: List[asyncio.Task] = []
        self.running = False
        self.host = host
        self.port = port
        self.username = username
        self.secret = secret

    @abstractmethod
    async def execute(self, query: dict) -> List[dict]:
        """
        Sends an AJAM command to the server

        :param query: The command parameters, including ``Action``
        :return: The records of the response
        """
        pass

    def register_callback(self, name: str, callback: Callback) -> None:
        """
        Registers a callback to be called as ``callback(payload, client)``.

        :param name: ``connected``, ``disconnected``, ``error``, ``event`` (every event),
                     or an event type such as ``Newchannel``
        :param callback: A function or coroutine function
        :return: None
        """
        if name in self._event_callbacks:
            self._event_callbacks[name].append(callback)
        else:
            self._event_callbacks[name] = [callback]

    def _get_functions(self, name: str) -> List[Callback]:
        return list(self._event_callbacks.get(name, []))

    async def _notify(self, functions: List[Callback], payload: Any) -> None:
        for fn in functions:
            try:
                result = fn(payload, self)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                self.logger.exception(f"Callback {fn!r} failed")

    async def publish(self, name: str, payload: Any = None) -> None:
        """
        Delivers a notification to the callbacks registered for it.

        :param name: The notification name
        :param payload: The value handed to the callbacks
        :return: None
        """
        await self._notify(self._get_functions(name), payload)

    async def publish_event(self, event: Dict[str, str]) -> None:
        """
        Delivers an event record to ``event`` callbacks, then to callbacks of its event type.

        :param event: The event record
        :return: None
        """
        functions = self._get_functions(EVENT)
        event_name = event.get('event')
        if event_name is not None and event_name not in (CONNECTED, DISCONNECTED, ERROR, EVENT):
            functions += self._get_functions(event_name)
        if functions:
            self.logger.debug(f"Execute callbacks for event '{event_name}'")
        await self._notify(functions, event)

    async def login(self, username: Optional[str] = None, secret: Optional[str] = None) -> Optional[List[dict]]:
        """
        Login to the AJAM server. Publishes ``connected`` on success and ``error`` on failure.

        :param username: The username for authentication
        :param secret: The secret for authentication
        :return: The response from the server, or None if the login failed
        """
        data = {
            "Action": "Login",
            "Username": self.username if username is None else username,
            "Secret": self.secret if secret is None else secret
        }
        try:
            response = await self.execute(data)
        except AJAMError as e:
            message = f"Unable to connect to remote asterisk ({e})"
            self.logger.error(message)
            await self.publish(ERROR, message)
            return None
        self.running = True
        await self.publish(CONNECTED)
        return response

    async def logoff(self) -> Optional[List[dict]]:
        """
        Logoff from the AJAM server. Publishes ``disconnected`` on success and ``error`` on failure.

        :return: The response from the server, or None if the logoff failed
        """
        try:
            response = await self.execute({"Action": "Logoff"})
        except AJAMError as e:
            message = f"Unable to connect to remote asterisk ({e})"
            self.logger.error(message)
            await self.publish(ERROR, message)
            return None
        self.running = False
        await self.publish(DISCONNECTED)
        return response

    async def wait_event(self, permanent: bool = False, timeout: Optional[int] = None) -> None:
        """
        Waits for Asterisk to send events and publishes each returned record as ``event``.

        In permanent mode a new ``WaitEvent`` is sent whenever a batch ends with
        ``WaitEventComplete``. Errors are published as ``error`` and stop the loop.
        :meth:`logoff` and :meth:`close` stop a permanent loop after the pending batch.

        :param permanent: Whether to keep waiting after each completed batch
        :param timeout: The server side wait timeout in seconds
        :return: None
        """
        query = {"Action": "WaitEvent"}
        if timeout is not None:
            query["Timeout"] = timeout

        self.running = True
        while True:
            try:
                events = await self.execute(query)
            except AJAMError as e:
                self.logger.error(f"WaitEvent failed: {e}")
                await self.publish(ERROR, str(e))
                return

            completed = False
            for event in events:
                await self.publish_event(event)
                if event.get('event') == WAIT_EVENT_COMPLETE:
                    completed = True

            if not (permanent and completed and self.running):
                return

    async def connect(self, username: Optional[str] = None, secret: Optional[str] = None,
                      permanent: bool = True) -> Optional[List[dict]]:
        """
        Logs in and, on success, starts waiting for events in the background.

        :param username: The username for authentication
        :param secret: The secret for authentication
        :param permanent: Whether the background event loop keeps re-subscribing
        :return: The login response, or None if the login failed
        """
        login_resp = await self.login(username, secret)
        if login_resp is not None:
            loop = asyncio.get_event_loop()
            self._loop_tasks.append(loop.create_task(self.wait_event(permanent)))
        return login_resp

    async def close(self) -> None:
        """
        Cancels the background tasks started by :meth:`connect`.

        :return: None
        """
        self.running = False
        tasks, self._loop_tasks = self._loop_tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def ping(self) -> List[dict]:
        """
        Sends a ping AJAM request

        :return: The response from the server
        """
        return await self.execute({"Action": "Ping"})

    async def core_show_channels(self) -> List[dict]:
        """
        Shows the channels on the AJAM server

        :return: The response from the server
        """
        return await self.execute({"Action": "CoreShowChannels"})

    async def originate(
            self,
            channel: str,
            extension: Optional[Union[str, int]] = None,
            context: Optional[str] = None,
            priority: Optional[int] = None,
            application: Optional[str] = None,
            app_data: Optional[str] = None,
            timeout: Optional[int] = None,
            caller_id: Optional[str] = None,
            variables: Optional[Dict[str, str]] = None,
            account: Optional[str] = None,
            run_async: Optional[bool] = None,
            action_id: Optional[str] = None
    ) -> List[dict]:
        """
        Sends an originate AJAM request

        :param channel: The channel to call
        :param extension: The extension to connect to once the channel answers
        :param context: The context of the extension
        :param priority: The priority of the extension
        :param application: The application to execute instead of an extension
        :param app_data: The data to send to the application
        :param timeout: The time to wait for an answer, in seconds
        :param caller_id: The caller ID to use for the call
        :param variables: Channel variables to set on the new channel
        :param account: The account code of the call
        :param run_async: Whether Asterisk answers before the call is set up
        :param action_id: An id echoed back in the response
        :return: The response from the server
        """
        if (application is None) != (app_data is None):
            raise ValueError(f'For "{"Application" if application is not None else "Data"}" '
                             f'required "{"Application" if application is None else "Data"}"')

        data = {
            "Action": "Originate",
            "Channel": channel,
            "Exten": extension,
            "Context": context,
            "Priority": priority,
            "Application": application,
            "Data": app_data,
            "Timeout": None if timeout is None else timeout * 1000,
            "CallerID": caller_id,
            "Account": account,
            "Async": run_async,
            "ActionID": action_id,
        }
        if variables:
            data["Variable"] = ','.join(f"{key}={value}" for key, value in variables.items())

        return await self.execute(data)

    async def redirect(
            self,
            channel: str,
            extension: Union[str, int],
            context: str,
            priority: int = 1,
            extra_channel: Optional[str] = None,
            extra_extension: Optional[Union[str, int]] = None,
            extra_context: Optional[str] = None,
            extra_priority: Optional[int] = None,
    ) -> List[dict]:
        """
        Sends a redirect AJAM request

        :param channel: The channel to redirect
        :param extension: The extension to redirect to
        :param context: The context to redirect to
        :param priority: The priority of the redirect
        :param extra_channel: The extra channel to redirect
        :param extra_extension: The extra extension to redirect to
        :param extra_context: The extra context to redirect to
        :param extra_priority: The extra priority of the redirect
        :return: The response from the server
        """
        return await self.execute({
            "Action": "Redirect",
            "Channel": channel,
            "Exten": extension,
            "Context": context,
            "Priority": priority,
            "ExtraChannel": extra_channel,
            "ExtraExten": extra_extension,
            "ExtraContext": extra_context,
            "ExtraPriority": extra_priority,
        })

    async def blind_transfer(self, channel: str, extension: Union[str, int], context: str) -> List[dict]:
        """
        Sends a blind transfer AJAM request

        :param channel: The channel to transfer
        :param extension: The number or extension to transfer to
        :param context: The context to transfer to
        :return: The response from the server
        """
        return await self.execute({
            "Action": "BlindTransfer",
            "Channel": channel,
            "Exten": extension,
            "Context": context
        })

    async def hangup(self, channel: str, cause: Optional[int] = None) -> List[dict]:
        """
        Hangs up a channel

        :param channel: The channel to hang up
        :param cause: The numeric hangup cause to set on the channel
        :return: The response from the server
        """
        return await self.execute({"Action": "Hangup", "Channel": channel, "Cause": cause})

    async def queue_pause(self, interface: str, paused: bool, queue: Optional[str] = None,
                          reason: Optional[str] = None) -> List[dict]:
        """
        Pauses or unpauses a queue member

        :param interface: The member interface, e.g. ``SIP/1000``
        :param paused: Whether the member is paused
        :param queue: Limit the change to one queue
        :param reason: The reason logged for the pause
        :return: The response from the server
        """
        return await self.execute({
            "Action": "QueuePause",
            "Interface": interface,
            "Paused": paused,
            "Queue": queue,
            "Reason": reason,
        })

    async def get_config(self, filename: str, category: Optional[str] = None) -> List[dict]:
        """
        Fetches a configuration file

        :param filename: The configuration file, e.g. ``sip.conf``
        :param category: Limit the result to one category of the file
        :return: The response from the server
        """
        return await self.execute({"Action": "GetConfig", "Filename": filename, "Category": category})

    async def command(self, command: str) -> List[dict]:
        """
        Runs an Asterisk CLI command

        :param command: The CLI command, e.g. ``core show version``
        :return: The response from the server
        """
        return await self.execute({"Action": "Command", "Command": command})
